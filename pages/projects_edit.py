"""
New Project and Edit Project tabs - project forms, deal size recalculation and document uploads.
"""
import streamlit as st
import pandas as pd
from utils.calculations import apply_project_update, calculate_total_hours
from utils.config import PROJECT_STATUSES
from utils.logger import get_logger
from utils.project_helpers import (
    DESCRIPTION_WORD_LIMIT, format_list_input, parse_list_input, within_word_limit, word_count
)
from utils.uploads import save_upload

logger = get_logger(__name__)


def _store_uploads(db, project_id, uploaded_files):
    """Save files from st.file_uploader and attach them to the project."""
    upload_dir = st.session_state.settings.upload_dir
    stored = []
    for uploaded in uploaded_files or []:
        document = save_upload(uploaded.getvalue(), uploaded.name, project_id=project_id, upload_root=upload_dir)
        db.add_project_document(project_id, document)
        stored.append(document)
    return stored


def _validate_project_form(name, description, deal_size, blended_rate):
    errors = []
    if not name:
        errors.append("Project name is required")
    if deal_size <= 0:
        errors.append("Deal size must be greater than zero")
    if blended_rate <= 0:
        errors.append("Blended rate must be greater than zero")
    if not within_word_limit(description):
        errors.append(f"Description is limited to {DESCRIPTION_WORD_LIMIT} words ({word_count(description)} entered)")
    return errors


def render_new_project_tab(db, processor):
    """Render the New Project form."""
    st.markdown("#### New Project")

    with st.form("new_project_form", clear_on_submit=True):
        col1, col2 = st.columns(2)

        with col1:
            name = st.text_input("Project Name*")
            description = st.text_area(
                "Description",
                help=f"Max {DESCRIPTION_WORD_LIMIT} words"
            )
            enduser_name = st.text_input("End User")
            partner_name = st.text_input("Partner")
            tech_stack = st.text_input("Tech Stack", placeholder="React, PostgreSQL, AWS")

        with col2:
            status = st.selectbox("Status", PROJECT_STATUSES)
            deal_size = st.number_input("Deal Size ($)*", min_value=0.0, step=1000.0)
            blended_rate = st.number_input("Blended Rate ($/hr)*", min_value=0.0, step=5.0)
            start_date = st.date_input("Start Date", value=None)
            end_date = st.date_input("End Date", value=None)
            period_months = st.number_input("Period (months)", min_value=0, step=1)
            google_drive_url = st.text_input("Google Drive URL")

        uploaded_files = st.file_uploader("Documents", accept_multiple_files=True, key="new_project_docs")

        submitted = st.form_submit_button("Create Project", type="primary")

        if submitted:
            errors = _validate_project_form(name, description, deal_size, blended_rate)
            if errors:
                for error in errors:
                    st.error(error)
            else:
                project_data = {
                    'name': name,
                    'description': description or None,
                    'status': status,
                    'deal_size': deal_size,
                    'blended_rate': blended_rate,
                    'start_date': start_date.strftime('%Y-%m-%d') if start_date else None,
                    'end_date': end_date.strftime('%Y-%m-%d') if end_date else None,
                    'period_months': int(period_months) if period_months else None,
                    'enduser_name': enduser_name or None,
                    'partner_name': partner_name or None,
                    'tech_stack': parse_list_input(tech_stack),
                    'google_drive_url': google_drive_url or None,
                }
                try:
                    project_id = db.add_project(project_data)
                    stored = _store_uploads(db, project_id, uploaded_files)
                    total_hours = calculate_total_hours(deal_size, blended_rate)
                    st.success(
                        f"Project '{name}' created with {total_hours:,.0f} billable hours"
                        + (f" and {len(stored)} document(s)" if stored else "")
                    )
                except Exception as e:
                    logger.exception("Error creating project")
                    st.error(f"Error creating project: {str(e)}")


def render_project_edit_tab(db, processor):
    """Render the Edit Project tab."""
    st.markdown("#### Edit Project")

    projects_df = db.get_projects()

    if projects_df.empty:
        st.info("No projects to edit yet")
        return

    project_id = st.selectbox(
        "Select Project to Edit",
        options=projects_df['id'].tolist(),
        format_func=lambda pid: projects_df.loc[projects_df['id'] == pid, 'name'].iloc[0],
        key="edit_project_select"
    )
    if not project_id:
        return

    project = db.get_project(project_id)
    st.markdown(f"##### Editing: {project['name']}")

    has_assignments = not db.get_assignments(project_id=project_id).empty
    if has_assignments:
        st.warning(
            "⚠️ Changing the deal size resets every assignment on this project to its role's "
            "default share of the new total hours. Manually adjusted hours will be lost."
        )

    with st.form("edit_project_form"):
        col1, col2 = st.columns(2)

        with col1:
            name = st.text_input("Project Name*", value=project['name'])
            description = st.text_area("Description", value=project['description'] or "",
                                       help=f"Max {DESCRIPTION_WORD_LIMIT} words")
            enduser_name = st.text_input("End User", value=project['enduser_name'] or "")
            partner_name = st.text_input("Partner", value=project['partner_name'] or "")
            tech_stack = st.text_input("Tech Stack", value=format_list_input(project['tech_stack']))

        with col2:
            current_status_index = PROJECT_STATUSES.index(project['status']) if project['status'] in PROJECT_STATUSES else 0
            status = st.selectbox("Status", PROJECT_STATUSES, index=current_status_index)
            deal_size = st.number_input("Deal Size ($)*", min_value=0.0, step=1000.0, value=float(project['deal_size']))
            blended_rate = st.number_input("Blended Rate ($/hr)*", min_value=0.0, step=5.0, value=float(project['blended_rate']))
            start_date = st.date_input("Start Date", value=pd.to_datetime(project['start_date']) if project['start_date'] else None)
            end_date = st.date_input("End Date", value=pd.to_datetime(project['end_date']) if project['end_date'] else None)
            period_months = st.number_input("Period (months)", min_value=0, step=1, value=int(project['period_months'] or 0))
            google_drive_url = st.text_input("Google Drive URL", value=project['google_drive_url'] or "")

        update_button = st.form_submit_button("Update Project", type="primary")

        if update_button:
            errors = _validate_project_form(name, description, deal_size, blended_rate)
            if errors:
                for error in errors:
                    st.error(error)
            else:
                updates = {
                    'name': name,
                    'description': description or None,
                    'status': status,
                    'deal_size': deal_size,
                    'blended_rate': blended_rate,
                    'start_date': start_date.strftime('%Y-%m-%d') if start_date else None,
                    'end_date': end_date.strftime('%Y-%m-%d') if end_date else None,
                    'period_months': int(period_months) if period_months else None,
                    'enduser_name': enduser_name or None,
                    'partner_name': partner_name or None,
                    'tech_stack': parse_list_input(tech_stack),
                    'google_drive_url': google_drive_url or None,
                }
                try:
                    updated, recalculated = apply_project_update(db, project_id, updates)
                    message = f"Project '{name}' updated: {updated['total_hours']:,.0f} total hours"
                    if recalculated:
                        message += " (assignment hours recalculated)"
                    st.success(message)
                    st.rerun()
                except Exception as e:
                    logger.exception("Error updating project")
                    st.error(f"Error updating project: {str(e)}")
