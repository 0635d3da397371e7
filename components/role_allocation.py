"""
Role Allocation Component

Shows how a project's total hours split across roles, how much of each
role's share is already handed to staff, and lets managers retune the
default role percentages.
"""

import streamlit as st
import pandas as pd
import plotly.graph_objects as go
from utils.config import PERCENTAGE_TOLERANCE
from utils.logger import get_logger

logger = get_logger(__name__)


def show_role_allocation(project, roles_df, assignments_df, processor):
    """Display the role breakdown for a project and return it"""

    st.markdown("#### 🧩 Role Allocation")

    total_hours = float(project['total_hours'] or 0)
    breakdown_df = processor.calculate_role_breakdown(total_hours, roles_df, assignments_df)

    if breakdown_df.empty:
        st.warning("⚠️ **No roles defined** - Add roles before assigning staff.")
        return breakdown_df

    pct_total = breakdown_df['percentage'].sum()
    if abs(pct_total - 100) > PERCENTAGE_TOLERANCE:
        st.info(
            f"Role percentages add up to {pct_total:.0f}%, so the role shares "
            f"cover {pct_total:.0f}% of the project's {total_hours:,.0f} hours."
        )

    for _, row in breakdown_df.iterrows():
        with st.container(border=True):
            col1, col2, col3 = st.columns([2, 3, 1])
            with col1:
                st.markdown(f"**{row['role_name']}**")
                st.caption(f"{row['percentage']:.0f}% · {row['role_hours']:,.1f} hrs")
            with col2:
                st.progress(
                    min(row['assigned_pct'] / 100, 1.0),
                    text=f"{row['assigned_hours']:,.1f} of {row['role_hours']:,.1f} hrs assigned"
                )
                if row['staff_summary']:
                    st.caption(row['staff_summary'])
            with col3:
                if row['remaining_hours'] > 0:
                    st.metric("Open", f"{row['remaining_hours']:,.0f}h")
                else:
                    st.metric("Open", "Full")

    display_role_chart(breakdown_df)
    return breakdown_df


def display_role_chart(breakdown_df):
    """Stacked bar of assigned vs open hours per role"""
    fig = go.Figure()
    fig.add_trace(go.Bar(
        y=breakdown_df['role_name'],
        x=breakdown_df['assigned_hours'],
        name='Assigned',
        orientation='h',
        marker_color='#1f77b4'
    ))
    fig.add_trace(go.Bar(
        y=breakdown_df['role_name'],
        x=breakdown_df['remaining_hours'],
        name='Open',
        orientation='h',
        marker_color='#c7c7c7'
    ))
    fig.update_layout(
        barmode='stack',
        height=60 + 40 * len(breakdown_df),
        margin=dict(l=10, r=10, t=10, b=10),
        xaxis_title='Hours',
        legend=dict(orientation='h', y=1.15)
    )
    st.plotly_chart(fig, use_container_width=True)


def show_role_percentage_editor(db, roles_df, processor, key_prefix="roles"):
    """
    Edit default allocation percentages for every role at once.

    The batch is only saved when the percentages add up to 100.
    """
    st.markdown("#### ⚖️ Role Percentages")
    st.caption("Default share of a project's hours per role. Must total 100%.")

    if roles_df.empty:
        st.info("No roles defined yet")
        return

    new_percentages = {}
    cols = st.columns(min(len(roles_df), 5))
    for i, (_, role) in enumerate(roles_df.iterrows()):
        with cols[i % len(cols)]:
            new_percentages[role['id']] = st.number_input(
                role['role_name'],
                min_value=0.0,
                max_value=100.0,
                step=1.0,
                value=float(role['default_allocation_percentage']),
                key=f"{key_prefix}_pct_{role['id']}"
            )

    total = processor.role_percentage_total(new_percentages)
    within_tolerance = round(abs(total - 100), 6) <= PERCENTAGE_TOLERANCE

    if within_tolerance:
        st.success(f"Total: {total:.2f}%")
    else:
        st.error(f"Total: {total:.2f}% - percentages must add up to 100%")

    if st.button("Save Role Percentages", disabled=not within_tolerance, key=f"{key_prefix}_save"):
        try:
            db.update_role_percentages([
                {'id': role_id, 'default_allocation_percentage': pct}
                for role_id, pct in new_percentages.items()
            ])
            st.success("Role percentages updated")
            st.rerun()
        except Exception as e:
            logger.exception("Error saving role percentages")
            st.error(f"Error saving role percentages: {str(e)}")


def role_options(breakdown_df: pd.DataFrame):
    """Role ids with a label showing open hours, for select boxes"""
    labels = {
        row['role_id']: f"{row['role_name']} ({row['remaining_hours']:,.0f} hrs open)"
        for _, row in breakdown_df.iterrows()
    }
    return list(labels.keys()), labels
