import streamlit as st
import plotly.graph_objects as go
import plotly.express as px
import pandas as pd
from utils.logger import get_logger
from utils.project_helpers import safe_currency_display, safe_hours_display

logger = get_logger(__name__)

db = st.session_state.db_manager
processor = st.session_state.data_processor
settings = st.session_state.settings

st.markdown("### 📊 Dashboard")

projects_df = db.get_projects()
assignments_df = db.get_assignments()
staff_df = processor.calculate_staff_totals(db.get_staff(), assignments_df, weekly_hours=settings.weekly_hours)
stats = processor.calculate_dashboard_stats(projects_df, staff_df)

# Stats grid
col1, col2, col3, col4 = st.columns(4)
with col1:
    st.metric(
        "Active Projects",
        stats['active_projects'],
        help=f"{stats['potential_projects']} potential, {stats['completed_projects']} completed"
    )
    st.caption(f"{stats['potential_projects']} potential")
with col2:
    st.metric("Total Deal Value", safe_currency_display(stats['total_deal_value']))
    st.caption("Across all projects")
with col3:
    st.metric("Total Hours", f"{stats['total_hours']:,.0f}")
    st.caption("Billable hours")
with col4:
    over_allocated = stats['over_allocated_staff']
    st.metric("Staff Members", stats['staff_count'])
    if not over_allocated.empty:
        st.caption(f"🔴 {len(over_allocated)} over-allocated")
    else:
        st.caption("All balanced")

# Over-allocated staff warning
if not over_allocated.empty:
    st.markdown("---")
    st.error(f"**Over-Allocated Staff ({len(over_allocated)})** - allocated hours exceed the weekly quota")
    for _, member in over_allocated.iterrows():
        col1, col2 = st.columns([4, 1])
        with col1:
            role_name = member['role_name'] if pd.notna(member['role_name']) else 'No role'
            st.write(f"{member['name']} ({role_name})")
        with col2:
            st.write(f"**{member['total_allocated_hours']:.1f} hrs** / {member['hours_quota']:.0f}")

st.markdown("---")

col1, col2 = st.columns(2)

with col1:
    st.markdown("#### Recent Projects")
    if projects_df.empty:
        st.info("No projects yet. Create one on the Projects page.")
    else:
        summary_df = processor.summarize_project_assignments(projects_df, assignments_df)
        for _, project in summary_df.head(5).iterrows():
            with st.container(border=True):
                top_left, top_right = st.columns([3, 1])
                with top_left:
                    st.markdown(f"**{project['name']}**")
                    client = project['enduser_name'] if pd.notna(project['enduser_name']) else 'No end user'
                    st.caption(f"{client} · {project['team_size']} staff")
                with top_right:
                    st.markdown(f"`{project['status']}`")
                st.write(
                    f"{safe_currency_display(project['deal_size'])} · "
                    f"{safe_hours_display(project['total_hours'])} · "
                    f"{project['logged_hours']:.0f} logged"
                )

with col2:
    st.markdown("#### Staff Workload")
    if staff_df.empty:
        st.info("No staff yet. Add people on the Staff page.")
    else:
        chart_df = staff_df.sort_values('total_allocated_hours', ascending=False)
        fig = go.Figure()
        fig.add_trace(go.Bar(
            x=chart_df['name'],
            y=chart_df['total_allocated_hours'],
            name='Allocated',
            marker_color=['#d62728' if over else '#1f77b4' for over in chart_df['is_over_allocated']]
        ))
        fig.add_trace(go.Bar(
            x=chart_df['name'],
            y=chart_df['total_logged_hours'],
            name='Logged',
            marker_color='#2ca02c'
        ))
        fig.update_layout(
            barmode='group',
            height=380,
            margin=dict(l=10, r=10, t=30, b=10),
            yaxis_title='Hours',
            legend=dict(orientation='h', y=1.1)
        )
        st.plotly_chart(fig, use_container_width=True)

# Deal value by status
if not projects_df.empty:
    st.markdown("---")
    st.markdown("#### Deal Value by Status")
    status_df = projects_df.groupby('status', as_index=False)['deal_size'].sum()
    fig = px.pie(status_df, values='deal_size', names='status', hole=0.4)
    fig.update_layout(height=320, margin=dict(l=10, r=10, t=10, b=10))
    st.plotly_chart(fig, use_container_width=True)
