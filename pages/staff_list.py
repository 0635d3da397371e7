"""
Staff List tab - staff table with allocation totals and a workload view.
"""
import streamlit as st
import pandas as pd
import plotly.express as px


def render_staff_list_tab(db, processor):
    """Render the Staff List tab with allocation totals."""
    st.markdown("#### Staff List")

    settings = st.session_state.settings
    staff_df = processor.calculate_staff_totals(
        db.get_staff(), db.get_assignments(), weekly_hours=settings.weekly_hours
    )

    if not staff_df.empty:
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Staff Members", len(staff_df))
        with col2:
            st.metric("Over-Allocated", int(staff_df['is_over_allocated'].sum()))
        with col3:
            st.metric("Avg Hourly Cost", f"${staff_df['hourly_cost'].mean():,.0f}")

        role_filter = st.selectbox(
            "Filter by Role",
            ["All"] + sorted(staff_df['role_name'].dropna().unique().tolist()),
            key="staff_role_filter"
        )

        filtered_df = staff_df.copy()
        if role_filter != "All":
            filtered_df = filtered_df[filtered_df['role_name'] == role_filter]

        display_df = pd.DataFrame()
        display_df['Name'] = filtered_df['name']
        display_df['Title'] = filtered_df['title']
        display_df['Role'] = filtered_df['role_name']
        display_df['Hourly Cost'] = filtered_df['hourly_cost'].apply(lambda v: f"${v:,.0f}")
        display_df['Quota'] = filtered_df['hours_quota']
        display_df['Projects'] = filtered_df['project_count']
        display_df['Allocated'] = filtered_df['total_allocated_hours'].round(1)
        display_df['Logged'] = filtered_df['total_logged_hours'].round(1)
        display_df['Status'] = filtered_df['is_over_allocated'].map({True: '🔴 Over', False: '🟢 OK'})

        # The dataframe itself has built-in sorting
        st.dataframe(display_df, use_container_width=True, hide_index=True)

        st.markdown("#### Allocated Hours vs Quota")
        chart_df = filtered_df.assign(
            quota=filtered_df['hours_quota'].fillna(settings.weekly_hours),
            state=filtered_df['is_over_allocated'].map({True: 'Over-allocated', False: 'Within quota'})
        )
        fig = px.bar(
            chart_df,
            x='name',
            y='total_allocated_hours',
            color='state',
            color_discrete_map={'Over-allocated': '#d62728', 'Within quota': '#1f77b4'},
            labels={'name': 'Staff', 'total_allocated_hours': 'Allocated hours', 'state': ''},
            hover_data={'quota': True, 'total_logged_hours': True}
        )
        fig.update_layout(height=360, margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No staff found. Add someone in the New Staff Member tab.")
