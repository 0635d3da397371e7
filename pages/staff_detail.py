"""
Staff Detail (Edit) and New Staff Member tabs - staff forms, profile fields and assignments.
"""
import streamlit as st
import pandas as pd
from utils.logger import get_logger
from utils.project_helpers import (
    EDUCATION_KEYS, EXPERIENCE_KEYS, format_list_input, format_record_lines,
    parse_list_input, parse_record_lines
)

logger = get_logger(__name__)


def _staff_form_fields(roles_df, member=None, key_prefix="staff"):
    """Render the shared staff fields inside an st.form and return the values."""
    member = member or {}
    weekly_hours = st.session_state.settings.weekly_hours

    col1, col2 = st.columns(2)
    with col1:
        name = st.text_input("Name*", value=member.get('name') or "", key=f"{key_prefix}_name")
        title = st.text_input("Title", value=member.get('title') or "", key=f"{key_prefix}_title")
        role_ids = roles_df['id'].tolist()
        role_index = role_ids.index(member['role_id']) if member.get('role_id') in role_ids else 0
        role_id = st.selectbox(
            "Role",
            options=role_ids,
            index=role_index,
            format_func=lambda rid: roles_df.loc[roles_df['id'] == rid, 'role_name'].iloc[0],
            key=f"{key_prefix}_role"
        )
        email = st.text_input("Email", value=member.get('email') or "", key=f"{key_prefix}_email")
        phone = st.text_input("Phone", value=member.get('phone') or "", key=f"{key_prefix}_phone")
    with col2:
        hourly_cost = st.number_input(
            "Hourly Cost ($)*", min_value=0.0, step=5.0,
            value=float(member.get('hourly_cost') or 0), key=f"{key_prefix}_cost"
        )
        hours_quota = st.number_input(
            "Hours Quota", min_value=0.0, step=1.0,
            value=float(member.get('hours_quota') or weekly_hours), key=f"{key_prefix}_quota",
            help="Allocated hours above this mark the person as over-allocated"
        )
        skills = st.text_input("Skills", value=format_list_input(member.get('skills')), key=f"{key_prefix}_skills")
        certifications = st.text_input(
            "Certifications", value=format_list_input(member.get('certifications')), key=f"{key_prefix}_certs"
        )

    bio = st.text_area("Bio", value=member.get('bio') or "", key=f"{key_prefix}_bio")
    executive_summary = st.text_area(
        "Executive Summary", value=member.get('executive_summary') or "", key=f"{key_prefix}_summary"
    )
    education = st.text_area(
        "Education", value=format_record_lines(member.get('education'), EDUCATION_KEYS),
        help="One per line: degree | institution | year", key=f"{key_prefix}_education"
    )
    experience = st.text_area(
        "Experience", value=format_record_lines(member.get('experience'), EXPERIENCE_KEYS),
        help="One per line: company | role | duration | description", key=f"{key_prefix}_experience"
    )

    return {
        'name': name.strip(),
        'title': title or None,
        'role_id': role_id,
        'hourly_cost': hourly_cost,
        'hours_quota': hours_quota,
        'email': email or None,
        'phone': phone or None,
        'bio': bio or None,
        'executive_summary': executive_summary or None,
        'skills': parse_list_input(skills),
        'certifications': parse_list_input(certifications),
        'education': parse_record_lines(education, EDUCATION_KEYS),
        'experience': parse_record_lines(experience, EXPERIENCE_KEYS),
    }


def render_new_staff_tab(db, processor):
    """Render the New Staff Member form."""
    st.markdown("#### New Staff Member")

    roles_df = db.get_roles()
    if roles_df.empty:
        st.warning("Add roles before adding staff")
        return

    with st.form("new_staff_form", clear_on_submit=True):
        staff_data = _staff_form_fields(roles_df, key_prefix="new_staff")
        submitted = st.form_submit_button("Add Staff Member", type="primary")

        if submitted:
            if not staff_data['name']:
                st.error("Name is required")
            elif staff_data['hourly_cost'] <= 0:
                st.error("Hourly cost must be greater than zero")
            else:
                try:
                    db.add_staff(staff_data)
                    st.success(f"Added {staff_data['name']}")
                except Exception as e:
                    logger.exception("Error adding staff member")
                    st.error(f"Error adding staff member: {str(e)}")


def render_staff_detail_tab(db, processor):
    """Render the Staff Detail (Edit) tab with assignments and profile editing."""
    st.markdown("#### Staff Detail (Edit)")

    staff_df = db.get_staff()

    if staff_df.empty:
        st.info("No staff found")
        return

    staff_id = st.selectbox(
        "Select Staff Member",
        options=staff_df['id'].tolist(),
        format_func=lambda sid: staff_df.loc[staff_df['id'] == sid, 'name'].iloc[0],
        key="edit_staff_select"
    )
    if not staff_id:
        return

    member = db.get_staff_member(staff_id)
    st.markdown(f"### {member['name']}")
    st.caption(f"{member['title'] or 'No title'} · {member['role_name'] or 'No role'}")

    detail_tab1, detail_tab2 = st.tabs(["Assignments", "Edit Staff Data"])

    with detail_tab1:
        render_staff_assignments(db, member)

    with detail_tab2:
        roles_df = db.get_roles()
        with st.form("edit_staff_form"):
            updates = _staff_form_fields(roles_df, member=member, key_prefix=f"edit_{staff_id}")
            update_button = st.form_submit_button("Update Staff Member", type="primary")

            if update_button:
                if not updates['name']:
                    st.error("Name is required")
                else:
                    try:
                        db.update_staff(staff_id, updates)
                        st.success(f"Updated {updates['name']}")
                        st.rerun()
                    except Exception as e:
                        logger.exception("Error updating staff member")
                        st.error(f"Error updating staff member: {str(e)}")

        st.markdown("---")
        st.markdown("##### Delete Staff Member")
        assignment_count = len(db.get_assignments(staff_id=staff_id))
        if assignment_count:
            st.caption(f"{assignment_count} assignment(s) will be removed as well")
        confirm = st.checkbox(f"Delete {member['name']}", key=f"delete_staff_confirm_{staff_id}")
        if st.button("Delete", type="secondary", disabled=not confirm, key=f"delete_staff_{staff_id}"):
            try:
                db.delete_staff(staff_id)
                st.success(f"Deleted {member['name']}")
                st.rerun()
            except Exception as e:
                st.error(f"Error deleting staff member: {str(e)}")


def render_staff_assignments(db, member):
    assignments_df = db.get_assignments(staff_id=member['id'])

    allocated = assignments_df['allocated_hours'].sum() if not assignments_df.empty else 0.0
    logged = assignments_df['logged_hours'].sum() if not assignments_df.empty else 0.0
    quota = member['hours_quota'] or st.session_state.settings.weekly_hours

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Allocated", f"{allocated:,.1f} hrs")
    with col2:
        st.metric("Logged", f"{logged:,.1f} hrs")
    with col3:
        st.metric("Quota", f"{quota:,.0f} hrs")

    if allocated > quota:
        st.error(f"🔴 Over-allocated by {allocated - quota:,.1f} hrs")

    if assignments_df.empty:
        st.info("Not assigned to any project")
        return

    display_df = pd.DataFrame()
    display_df['Project'] = assignments_df['project_name']
    display_df['Status'] = assignments_df['project_status']
    display_df['Role'] = assignments_df['role_name']
    display_df['Allocated'] = assignments_df['allocated_hours'].round(1)
    display_df['Logged'] = assignments_df['logged_hours'].round(1)
    st.dataframe(display_df, use_container_width=True, hide_index=True)
