import streamlit as st
import pandas as pd
from utils.logger import get_logger

logger = get_logger(__name__)

db = st.session_state.db_manager

st.markdown("### 🪪 Staff Profiles")

staff_df = db.get_staff()


def render_profile(member):
    """Full profile: contact, bio, summary, skills, education, experience, certifications"""
    col1, col2 = st.columns([3, 1])
    with col1:
        st.markdown(f"## {member['name']}")
        st.markdown(f"**{member['title'] or member['role_name'] or ''}**")
    with col2:
        if st.button("← All profiles"):
            st.session_state.profile_staff_id = None
            st.rerun()

    contact = []
    if member['email']:
        contact.append(f"✉️ {member['email']}")
    if member['phone']:
        contact.append(f"📞 {member['phone']}")
    if member['role_name']:
        contact.append(f"🧩 {member['role_name']}")
    if contact:
        st.caption(" · ".join(contact))

    if member['executive_summary']:
        st.markdown("#### Executive Summary")
        st.info(member['executive_summary'])

    if member['bio']:
        st.markdown("#### Bio")
        st.write(member['bio'])

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("#### Skills")
        if member['skills']:
            st.markdown(" ".join(f"`{skill}`" for skill in member['skills']))
        else:
            st.caption("None listed")

        st.markdown("#### Certifications")
        if member['certifications']:
            for certification in member['certifications']:
                st.markdown(f"- 🏅 {certification}")
        else:
            st.caption("None listed")

    with col2:
        st.markdown("#### Education")
        if member['education']:
            for entry in member['education']:
                if isinstance(entry, dict):
                    year = f" ({entry['year']})" if entry.get('year') else ""
                    st.markdown(f"- **{entry.get('degree', '')}**, {entry.get('institution', '')}{year}")
                else:
                    st.markdown(f"- {entry}")
        else:
            st.caption("None listed")

    st.markdown("#### Experience")
    if member['experience']:
        for entry in member['experience']:
            with st.container(border=True):
                if isinstance(entry, dict):
                    st.markdown(f"**{entry.get('role', '')}** · {entry.get('company', '')}")
                    if entry.get('duration'):
                        st.caption(entry['duration'])
                    if entry.get('description'):
                        st.write(entry['description'])
                else:
                    st.write(entry)
    else:
        st.caption("None listed")


if staff_df.empty:
    st.info("No staff found. Add people on the Staff page.")
else:
    if 'profile_staff_id' not in st.session_state:
        st.session_state.profile_staff_id = None

    selected_id = st.session_state.profile_staff_id
    if selected_id is not None and selected_id not in set(staff_df['id']):
        selected_id = st.session_state.profile_staff_id = None

    if selected_id is not None:
        render_profile(db.get_staff_member(selected_id))
    else:
        search_term = st.text_input(
            "🔍 Search profiles",
            placeholder="Search by name, title, or role...",
            label_visibility="collapsed"
        )

        filtered_df = staff_df
        if search_term:
            search_mask = (
                staff_df['name'].str.contains(search_term, case=False, na=False) |
                staff_df['title'].str.contains(search_term, case=False, na=False) |
                staff_df['role_name'].str.contains(search_term, case=False, na=False)
            )
            filtered_df = staff_df[search_mask]

        cols = st.columns(3)
        for idx, (_, row) in enumerate(filtered_df.iterrows()):
            member = db.get_staff_member(row['id'])
            with cols[idx % 3]:
                with st.container(border=True):
                    st.markdown(f"### 👤 {member['name']}")
                    st.write(f"**{member['title'] if member['title'] else 'N/A'}**")
                    st.caption(member['role_name'] if pd.notna(member['role_name']) else 'No role')
                    if member['skills']:
                        shown = member['skills'][:4]
                        more = len(member['skills']) - len(shown)
                        st.markdown(" ".join(f"`{skill}`" for skill in shown) + (f" +{more}" if more > 0 else ""))
                    if st.button("View Profile", key=f"view_profile_{member['id']}"):
                        st.session_state.profile_staff_id = member['id']
                        st.rerun()

        if filtered_df.empty:
            st.info(f"No profiles found matching '{search_term}'")
