# Pages package initialization
# Page scripts (overview, projects, staff, ...) run through st.navigation in app.py;
# the *_list / *_detail / *_edit modules hold the tab renderers they import.
