"""
Project Details tab - role breakdown, staff assignments, hour logging and documents.
"""
import streamlit as st
import pandas as pd
from components.role_allocation import role_options, show_role_allocation, show_role_percentage_editor
from utils.calculations import calculate_total_hours, recalculate_project_allocations
from utils.logger import get_logger
from utils.project_helpers import safe_currency_display, safe_hours_display
from utils.uploads import save_upload

logger = get_logger(__name__)


def render_project_details_tab(db, processor):
    """Render the Project Details tab."""
    projects_df = db.get_projects()

    if projects_df.empty:
        st.info("No projects found. Create one in the New Project tab.")
        return

    project_id = st.selectbox(
        "Select Project",
        options=projects_df['id'].tolist(),
        format_func=lambda pid: projects_df.loc[projects_df['id'] == pid, 'name'].iloc[0],
        key="detail_project_select"
    )
    if not project_id:
        return

    project = db.get_project(project_id)
    roles_df = db.get_roles()
    assignments_df = db.get_assignments(project_id=project_id)

    render_project_header(project, assignments_df)

    st.markdown("---")

    breakdown_df = show_role_allocation(project, roles_df, assignments_df, processor)

    st.markdown("---")

    render_assign_staff_form(db, processor, project, roles_df, assignments_df, breakdown_df)

    st.markdown("---")

    render_team_section(db, processor, project, roles_df, assignments_df)

    st.markdown("---")

    render_documents_section(db, project)

    st.markdown("---")

    with st.expander("⚙️ Allocation settings"):
        render_allocation_settings(db, processor, project, roles_df, assignments_df)


def render_project_header(project, assignments_df):
    st.markdown(f"### {project['name']}")
    if project['description']:
        st.write(project['description'])

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Status", project['status'])
    with col2:
        st.metric("Deal Size", safe_currency_display(project['deal_size']))
    with col3:
        st.metric("Blended Rate", f"${project['blended_rate']:,.0f}/hr")
    with col4:
        st.metric("Total Hours", safe_hours_display(project['total_hours']))

    details = []
    if project['enduser_name']:
        details.append(f"**End user:** {project['enduser_name']}")
    if project['partner_name']:
        details.append(f"**Partner:** {project['partner_name']}")
    if project['start_date'] or project['end_date']:
        details.append(f"**Dates:** {project['start_date'] or '?'} → {project['end_date'] or '?'}")
    if project['period_months']:
        details.append(f"**Period:** {project['period_months']} months")
    if details:
        st.markdown(" · ".join(details))

    if project['tech_stack']:
        st.markdown(" ".join(f"`{tech}`" for tech in project['tech_stack']))

    if project['google_drive_url']:
        st.markdown(f"[📁 Google Drive]({project['google_drive_url']})")

    if not assignments_df.empty:
        allocated = assignments_df['allocated_hours'].sum()
        logged = assignments_df['logged_hours'].sum()
        st.caption(f"{allocated:,.1f} hrs assigned · {logged:,.1f} hrs logged")


def render_assign_staff_form(db, processor, project, roles_df, assignments_df, breakdown_df):
    """Assign a staff member to a role, bounded by the role's open hours"""
    st.markdown("#### ➕ Assign Staff")

    staff_df = db.get_staff()
    if staff_df.empty:
        st.info("No staff yet. Add people on the Staff page.")
        return
    if breakdown_df.empty:
        return

    role_ids, role_labels = role_options(breakdown_df)

    col1, col2 = st.columns(2)
    with col1:
        role_id = st.selectbox(
            "Role",
            options=role_ids,
            format_func=lambda rid: role_labels[rid],
            key=f"assign_role_{project['id']}"
        )
    with col2:
        staff_id = st.selectbox(
            "Staff Member",
            options=staff_df['id'].tolist(),
            format_func=lambda sid: staff_df.loc[staff_df['id'] == sid, 'name'].iloc[0],
            key=f"assign_staff_{project['id']}"
        )

    role = processor.find_role_row(roles_df, role_id)
    available = processor.get_role_available_hours(
        project['total_hours'], role['default_allocation_percentage'], assignments_df, role_id
    )

    existing = assignments_df[(assignments_df['staff_id'] == staff_id) & (assignments_df['role_id'] == role_id)]
    if not existing.empty:
        st.info("This person already holds this role on the project; use Edit Hours below to change their hours.")
        return

    if available <= 0:
        st.warning(f"All {role['role_name']} hours are already assigned.")
        return

    hours = st.number_input(
        f"Hours (up to {available:,.1f})",
        min_value=0.0,
        max_value=float(available),
        value=float(available),
        step=1.0,
        key=f"assign_hours_{project['id']}_{role_id}"
    )

    if st.button("Assign", type="primary", key=f"assign_button_{project['id']}"):
        if hours <= 0:
            st.error("Hours must be greater than zero")
            return
        try:
            db.upsert_assignment(project['id'], staff_id, role_id, allocated_hours=hours)
            st.success("Staff assigned")
            st.rerun()
        except Exception as e:
            logger.exception("Error assigning staff")
            st.error(f"Error assigning staff: {str(e)}")


def render_team_section(db, processor, project, roles_df, assignments_df):
    st.markdown("#### 👥 Team")

    if assignments_df.empty:
        st.info("Nobody is assigned to this project yet")
        return

    display_df = pd.DataFrame()
    display_df['Staff'] = assignments_df['staff_name']
    display_df['Role'] = assignments_df['role_name']
    display_df['Allocated'] = assignments_df['allocated_hours'].round(1)
    display_df['Logged'] = assignments_df['logged_hours'].round(1)
    display_df['Remaining'] = (assignments_df['allocated_hours'] - assignments_df['logged_hours']).round(1)
    st.dataframe(display_df, use_container_width=True, hide_index=True)

    assignment_id = st.selectbox(
        "Assignment",
        options=assignments_df['id'].tolist(),
        format_func=lambda aid: "{} - {}".format(
            *assignments_df.loc[assignments_df['id'] == aid, ['staff_name', 'role_name']].iloc[0]
        ),
        key=f"team_assignment_{project['id']}"
    )
    assignment = assignments_df[assignments_df['id'] == assignment_id].iloc[0]

    col1, col2, col3 = st.columns(3)
    with col1:
        render_edit_hours(db, processor, project, roles_df, assignments_df, assignment)
    with col2:
        render_log_hours(db, assignment)
    with col3:
        st.markdown("**Unassign**")
        if assignment['logged_hours'] > 0:
            st.caption(f"{assignment['logged_hours']:.1f} logged hours will be removed with the assignment")
        confirm = st.checkbox("Confirm", key=f"unassign_confirm_{assignment_id}")
        if st.button("Unassign", disabled=not confirm, key=f"unassign_{assignment_id}"):
            try:
                db.delete_assignment(assignment_id)
                st.success(f"{assignment['staff_name']} unassigned")
                st.rerun()
            except Exception as e:
                st.error(f"Error unassigning: {str(e)}")


def render_edit_hours(db, processor, project, roles_df, assignments_df, assignment):
    """Change allocated hours within the role's quota"""
    st.markdown("**Edit Hours**")

    role = processor.find_role_row(roles_df, assignment['role_id'])
    percentage = role['default_allocation_percentage'] if role is not None else assignment['default_allocation_percentage']
    max_hours = processor.get_max_allowed_hours(
        project['total_hours'], percentage, assignments_df, assignment['role_id'], assignment['id']
    )
    current = float(assignment['allocated_hours'])

    new_hours = st.number_input(
        f"Allocated (max {max_hours:,.1f})",
        min_value=0.0,
        max_value=max(float(max_hours), current),
        value=current,
        step=1.0,
        key=f"edit_hours_{assignment['id']}"
    )

    logged = float(assignment['logged_hours'])
    below_logged = new_hours < logged
    confirmed = True
    if below_logged:
        st.warning(f"{new_hours:.1f} hrs is below the {logged:.1f} hrs already logged")
        confirmed = st.checkbox("Allocate fewer hours than logged", key=f"below_logged_{assignment['id']}")

    if st.button("Save Hours", key=f"save_hours_{assignment['id']}", disabled=not confirmed):
        if new_hours <= 0:
            st.error("Hours must be greater than zero")
        elif new_hours > max_hours:
            st.error(f"Only {max_hours:,.1f} hrs are available for this role")
        else:
            try:
                db.update_assignment(assignment['id'], {'allocated_hours': new_hours})
                st.success("Hours updated")
                st.rerun()
            except Exception as e:
                st.error(f"Error updating hours: {str(e)}")


def render_log_hours(db, assignment):
    st.markdown("**Log Hours**")
    hours = st.number_input("Hours worked", min_value=0.0, step=0.5, key=f"log_hours_{assignment['id']}")
    if st.button("Log", key=f"log_button_{assignment['id']}"):
        if hours <= 0:
            st.error("Hours must be greater than zero")
            return
        try:
            updated = db.log_hours(assignment['id'], hours)
            st.success(f"{updated['logged_hours']:.1f} hrs logged in total")
            st.rerun()
        except Exception as e:
            st.error(f"Error logging hours: {str(e)}")


def render_documents_section(db, project):
    st.markdown("#### 📎 Documents")

    documents = project['documents'] or []
    if documents:
        for document in documents:
            uploaded_at = pd.to_datetime(document.get('uploaded_at')) if document.get('uploaded_at') else None
            stamp = f" · {uploaded_at:%Y-%m-%d %H:%M}" if uploaded_at is not None else ""
            st.markdown(f"- [{document.get('name')}]({document.get('url')}){stamp}")
    else:
        st.caption("No documents uploaded")

    uploaded = st.file_uploader("Upload document", key=f"doc_upload_{project['id']}")
    if uploaded is not None and st.button("Attach", key=f"doc_attach_{project['id']}"):
        try:
            document = save_upload(
                uploaded.getvalue(),
                uploaded.name,
                project_id=project['id'],
                upload_root=st.session_state.settings.upload_dir
            )
            db.add_project_document(project['id'], document)
            st.success(f"Attached {document['name']}")
            st.rerun()
        except Exception as e:
            logger.exception("Error uploading document")
            st.error(f"Error uploading document: {str(e)}")


def render_allocation_settings(db, processor, project, roles_df, assignments_df):
    total_hours = calculate_total_hours(project['deal_size'], project['blended_rate'])
    st.markdown(
        f"**{safe_currency_display(project['deal_size'])}** at **${project['blended_rate']:,.0f}/hr** "
        f"= **{total_hours:,.1f} hrs**"
    )
    share_df = processor.role_share_table(total_hours, roles_df)
    if share_df.empty:
        st.info("No roles defined yet")
    else:
        st.dataframe(share_df, use_container_width=True, hide_index=True)
    if not assignments_df.empty:
        st.caption("Resetting overwrites every assignment's hours with its role's full share.")
        if st.button("Reset assignments to role shares", key=f"recalc_{project['id']}"):
            updated = recalculate_project_allocations(db, project['id'])
            st.success(f"{updated} assignment(s) recalculated")
            st.rerun()

    st.markdown("---")
    show_role_percentage_editor(db, roles_df, processor, key_prefix=f"project_{project['id']}")
