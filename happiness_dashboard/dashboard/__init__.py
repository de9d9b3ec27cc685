"""
Streamlit front end.  Import ``main`` from ``happiness_dashboard.dashboard.app``
inside a Streamlit script; importing this package does not start the app.
"""
