import logging
from datetime import datetime

# Setup logging FIRST, before any Streamlit imports
from utils.config import load_settings
from utils.logger import setup_logging, get_logger

settings = load_settings()
setup_logging(log_level=getattr(logging, settings.log_level, logging.INFO), log_dir=settings.log_dir)
logger = get_logger(__name__)

# Now import Streamlit and other dependencies
import streamlit as st

# Page configuration - must be first Streamlit command
st.set_page_config(
    page_title="Staffing Dashboard",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
    <style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #1f77b4;
        text-align: center;
        margin-bottom: 2rem;
    }
    .role-card {
        background-color: #f0f2f6;
        padding: 1rem;
        border-radius: 0.5rem;
        margin: 0.5rem 0;
    }
    </style>
""", unsafe_allow_html=True)

from utils.database import DatabaseManager
from utils.data_processor import DataProcessor

# Initialize session state BEFORE defining pages
# This ensures session state exists when page modules are imported
if 'db_manager' not in st.session_state:
    logger.info(f"Initializing database manager ({settings.db_path}) and data processor")
    st.session_state.db_manager = DatabaseManager(settings.db_path)
    st.session_state.data_processor = DataProcessor()
    st.session_state.settings = settings

    if st.session_state.db_manager.is_empty():
        logger.info("Database is empty, loading sample data")
        from utils.sample_data import generate_sample_data
        generate_sample_data(st.session_state.db_manager)

# Define pages using st.Page
overview_page = st.Page(
    "pages/overview.py",
    title="Dashboard",
    icon="📊",
    default=True
)
projects_page = st.Page(
    "pages/projects.py",
    title="Projects",
    icon="🚀"
)
staff_page = st.Page(
    "pages/staff.py",
    title="Staff",
    icon="👥"
)
profiles_page = st.Page(
    "pages/staff_profiles.py",
    title="Staff Profiles",
    icon="🪪"
)
data_page = st.Page(
    "pages/data_management.py",
    title="Data Management",
    icon="💾"
)

pg = st.navigation([
    overview_page,
    projects_page,
    staff_page,
    profiles_page,
    data_page
])

# Quick stats in sidebar
with st.sidebar:
    st.markdown("### 📈 Quick Stats")

    db = st.session_state.db_manager
    projects_df = db.get_projects()
    staff_df = db.get_staff()

    if not projects_df.empty:
        active_projects = projects_df[projects_df['status'] == 'Active']
        st.metric("Active Projects", len(active_projects))
        st.metric("Active Deal Value", f"${active_projects['deal_size'].sum():,.0f}")
    st.metric("Staff Members", len(staff_df))

pg.run()

# Footer
st.markdown("---")
st.markdown(
    """
    <div style='text-align: center; color: #666;'>
        Staffing Dashboard v1.0 | Last updated: {0}
    </div>
    """.format(datetime.now().strftime("%Y-%m-%d %H:%M")),
    unsafe_allow_html=True
)
