import streamlit as st
import pandas as pd
from datetime import datetime
import io
from utils.logger import get_logger
from utils.sample_data import generate_sample_data

logger = get_logger(__name__)

db = st.session_state.db_manager

st.markdown("### 💾 Data Management")

tab1, tab2, tab3 = st.tabs(["Export Data", "Sample Data", "Database Management"])


def _export_tables():
    return {
        'Roles': db.get_roles(),
        'Staff': db.get_staff(),
        'Projects': db.get_projects(),
        'Assignments': db.get_assignments(),
    }


with tab1:
    st.markdown("#### Export Data")

    export_type = st.selectbox(
        "Select Data to Export",
        ["Projects", "Staff", "Roles", "Assignments", "Complete Database"]
    )

    if st.button("Generate Export"):
        try:
            tables = _export_tables()

            if export_type == "Complete Database":
                # Multi-sheet Excel file with a metadata sheet first
                output = io.BytesIO()
                with pd.ExcelWriter(output, engine='xlsxwriter') as writer:
                    metadata = pd.DataFrame({
                        'Export Date': [datetime.now().strftime('%Y-%m-%d %H:%M:%S')],
                        **{f'{name} Count': [len(df)] for name, df in tables.items()}
                    })
                    metadata.to_excel(writer, sheet_name='Metadata', index=False)
                    for name, df in tables.items():
                        df.to_excel(writer, sheet_name=name, index=False)

                st.download_button(
                    label="Download Complete Database (Excel)",
                    data=output.getvalue(),
                    file_name=f"staffing_export_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx",
                    mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
                )
                st.success("Export ready for download!")
                st.stop()

            export_df = tables[export_type]

            if not export_df.empty:
                csv = export_df.to_csv(index=False)

                st.download_button(
                    label=f"Download {export_type} (CSV)",
                    data=csv,
                    file_name=f"{export_type.lower()}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv",
                    mime="text/csv"
                )

                st.markdown("##### Export Preview")
                st.dataframe(export_df.head(), use_container_width=True)
                st.info(f"Export contains {len(export_df)} records")
            else:
                st.warning(f"No data found for {export_type}")

        except Exception as e:
            logger.exception("Error generating export")
            st.error(f"Error generating export: {str(e)}")

with tab2:
    st.markdown("#### Sample Data")
    st.write(
        "Load the demo roles, staff, projects and assignments. "
        "Records that already exist are left untouched."
    )

    if st.button("Load Sample Data"):
        try:
            created = generate_sample_data(db)
            if any(created.values()):
                st.success(
                    "Created " + ", ".join(f"{count} {table}" for table, count in created.items())
                )
            else:
                st.info("Sample data is already loaded")
        except Exception as e:
            logger.exception("Error loading sample data")
            st.error(f"Error loading sample data: {str(e)}")

with tab3:
    st.markdown("#### Database Management")

    st.markdown("##### Database Statistics")

    tables = _export_tables()
    cols = st.columns(len(tables))
    for col, (name, df) in zip(cols, tables.items()):
        with col:
            st.metric(name, len(df))

    st.caption(f"Database file: `{st.session_state.settings.db_path}`")

    st.markdown("##### Remove Completed Projects")
    completed = tables['Projects']
    completed = completed[completed['status'] == 'Completed'] if not completed.empty else completed
    if not completed.empty:
        st.write(f"Found {len(completed)} completed projects")
        if st.button("Remove Completed Projects", type="secondary"):
            for project_id in completed['id']:
                db.delete_project(project_id)
            st.success(f"Removed {len(completed)} completed projects and their assignments")
            st.rerun()
    else:
        st.info("No completed projects found")

    st.markdown("##### Reset Database")
    st.error("⚠️ This will delete ALL data and cannot be undone!")
    reload_sample = st.checkbox("Reload sample data after reset", value=True)
    confirm_text = st.text_input("Type 'RESET' to confirm")
    if st.button("Reset Database", type="primary", disabled=confirm_text != "RESET"):
        try:
            db.reset_database()
            if reload_sample:
                generate_sample_data(db)
            st.success("Database reset")
            st.rerun()
        except Exception as e:
            logger.exception("Error resetting database")
            st.error(f"Error resetting database: {str(e)}")
