import streamlit as st
from utils.logger import get_logger
from pages.projects_list import render_project_list_tab
from pages.projects_detail import render_project_details_tab
from pages.projects_edit import render_new_project_tab, render_project_edit_tab

logger = get_logger(__name__)

db = st.session_state.db_manager
processor = st.session_state.data_processor

st.markdown("### 🚀 Projects")

# Lazy loading: Use radio buttons to select tab and only render the active one
tab_names = ["Project List", "Project Details", "New Project", "Edit Project"]

if 'project_active_tab' not in st.session_state:
    st.session_state.project_active_tab = tab_names[0]

selected_tab = st.radio(
    "Select View",
    tab_names,
    index=tab_names.index(st.session_state.project_active_tab),
    horizontal=True,
    key="project_tab_selector",
    label_visibility="collapsed"
)

st.session_state.project_active_tab = selected_tab

st.markdown("---")

if selected_tab == "Project List":
    render_project_list_tab(db, processor)
elif selected_tab == "Project Details":
    render_project_details_tab(db, processor)
elif selected_tab == "New Project":
    render_new_project_tab(db, processor)
elif selected_tab == "Edit Project":
    render_project_edit_tab(db, processor)
