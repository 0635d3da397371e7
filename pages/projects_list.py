"""
Project List tab - displays filterable table of all projects with summary metrics.
"""
import streamlit as st
import pandas as pd
from utils.config import PROJECT_STATUSES
from utils.database import decode_json_field
from utils.project_helpers import safe_currency_display, safe_hours_display


def render_project_list_tab(db, processor):
    """Render the Project List tab with filtering and sorting."""
    projects_df = db.get_projects()

    if not projects_df.empty:
        projects_df = processor.summarize_project_assignments(projects_df, db.get_assignments())

        st.markdown("#### Project Overview")

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Active", int((projects_df['status'] == 'Active').sum()))
        with col2:
            st.metric("Potential", int((projects_df['status'] == 'Potential').sum()), help="Deals not yet signed")
        with col3:
            st.metric("Completed", int((projects_df['status'] == 'Completed').sum()))
        with col4:
            total_deal = projects_df['deal_size'].sum()
            st.metric("Total Deal Value", f"${total_deal/1e3:,.0f}K")

        st.markdown("---")

        col1, col2 = st.columns([2, 1])

        with col1:
            selected_statuses = st.multiselect(
                "Filter by Status",
                options=PROJECT_STATUSES,
                default=['Active', 'Potential'],
                help="Select one or more statuses to display"
            )

        with col2:
            sort_by = st.selectbox(
                "Sort by",
                options=[
                    "Newest",
                    "Name (A-Z)",
                    "Deal Size (High to Low)",
                    "Total Hours (High to Low)",
                    "Logged % (High to Low)",
                ]
            )

        search_term = st.text_input(
            "🔍 Search projects",
            placeholder="Search by name, end user, or partner...",
            label_visibility="collapsed"
        )

        st.markdown("---")

        filtered_df = projects_df.copy()

        if selected_statuses:
            filtered_df = filtered_df[filtered_df['status'].isin(selected_statuses)]
        else:
            filtered_df = filtered_df.iloc[0:0]

        if search_term:
            search_mask = (
                filtered_df['name'].str.contains(search_term, case=False, na=False) |
                filtered_df['enduser_name'].str.contains(search_term, case=False, na=False) |
                filtered_df['partner_name'].str.contains(search_term, case=False, na=False)
            )
            filtered_df = filtered_df[search_mask]

        if sort_by == "Name (A-Z)":
            filtered_df = filtered_df.sort_values('name')
        elif sort_by == "Deal Size (High to Low)":
            filtered_df = filtered_df.sort_values('deal_size', ascending=False)
        elif sort_by == "Total Hours (High to Low)":
            filtered_df = filtered_df.sort_values('total_hours', ascending=False, na_position='last')
        elif sort_by == "Logged % (High to Low)":
            filtered_df = filtered_df.sort_values('logged_pct', ascending=False)

        st.caption(f"Showing {len(filtered_df)} of {len(projects_df)} projects")

        if not filtered_df.empty:
            display_df = pd.DataFrame()
            display_df['Project'] = filtered_df['name']
            display_df['End User'] = filtered_df['enduser_name']
            display_df['Status'] = filtered_df['status']
            display_df['Start'] = filtered_df['start_date']
            display_df['End'] = filtered_df['end_date']
            display_df['Deal Size'] = filtered_df['deal_size'].apply(safe_currency_display)
            display_df['Rate'] = filtered_df['blended_rate'].apply(lambda v: f"${v:,.0f}/hr" if pd.notna(v) else '-')
            display_df['Total Hours'] = filtered_df['total_hours'].apply(safe_hours_display)
            display_df['Team'] = filtered_df['team_size']
            display_df['Logged %'] = filtered_df['logged_pct']
            display_df['Tech Stack'] = filtered_df['tech_stack'].apply(lambda v: ', '.join(decode_json_field(v)))

            st.dataframe(
                display_df,
                use_container_width=True,
                hide_index=True,
                column_config={
                    "Logged %": st.column_config.ProgressColumn(
                        "Logged %",
                        help="Logged hours as a share of assigned hours",
                        min_value=0,
                        max_value=100,
                        format="%.0f%%",
                    ),
                }
            )

            # Delete from the list
            with st.expander("🗑️ Delete a project"):
                to_delete = st.selectbox(
                    "Project",
                    options=filtered_df['id'].tolist(),
                    format_func=lambda pid: projects_df.loc[projects_df['id'] == pid, 'name'].iloc[0],
                    key="delete_project_select"
                )
                confirm = st.checkbox("I understand this also removes the project's assignments", key="delete_project_confirm")
                if st.button("Delete Project", type="secondary", disabled=not confirm):
                    try:
                        db.delete_project(to_delete)
                        st.success("Project deleted")
                        st.rerun()
                    except Exception as e:
                        st.error(f"Error deleting project: {str(e)}")
        else:
            if not selected_statuses:
                st.info("👆 Select at least one project status above to view projects")
            elif search_term:
                st.info(f"No projects found matching '{search_term}' with status: {', '.join(selected_statuses)}")
            else:
                st.info(f"No projects found with status: {', '.join(selected_statuses)}")

    else:
        st.info("No projects found. Create one in the New Project tab.")
