import streamlit as st
from utils.logger import get_logger
from pages.staff_list import render_staff_list_tab
from pages.staff_detail import render_new_staff_tab, render_staff_detail_tab

logger = get_logger(__name__)

db = st.session_state.db_manager
processor = st.session_state.data_processor

st.markdown("### 👥 Staff")

# Lazy loading: Use radio buttons to select tab and only render the active one
tab_names = ["Staff List", "Staff Detail (Edit)", "New Staff Member"]

if 'staff_active_tab' not in st.session_state:
    st.session_state.staff_active_tab = tab_names[0]

selected_tab = st.radio(
    "Select View",
    tab_names,
    index=tab_names.index(st.session_state.staff_active_tab),
    horizontal=True,
    key="staff_tab_selector",
    label_visibility="collapsed"
)

st.session_state.staff_active_tab = selected_tab

st.markdown("---")

if selected_tab == "Staff List":
    render_staff_list_tab(db, processor)
elif selected_tab == "Staff Detail (Edit)":
    render_staff_detail_tab(db, processor)
elif selected_tab == "New Staff Member":
    render_new_staff_tab(db, processor)
