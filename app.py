# app.py
import logging

import streamlit as st

import config
from admin_dashboard import admin_dashboard
from api_client import ApiClient, AuthenticationRequired
from auth_views import home_view, login_view, register_view
from controllers import handle_session_expiry
from navigation import current_page, drop_controllers, navigate, show_flash
from session import SessionContext, default_storage
from user_dashboard import user_dashboard
import widgets

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

st.set_page_config(page_title="UserHub", layout="wide")

# -------------------- Session State --------------------
if "session" not in st.session_state:
    st.session_state.session = SessionContext(default_storage()).hydrate()
if "api" not in st.session_state:
    st.session_state.api = ApiClient(st.session_state.session)
if "page" not in st.session_state:
    st.session_state.page = "dashboard" if st.session_state.session.is_logged_in() else "home"

VIEWS = {
    "home": home_view,
    "login": login_view,
    "register": register_view,
    "dashboard": user_dashboard,
    "admin": admin_dashboard,
}

# -------------------- App Entry --------------------
widgets.inject_styles()
show_flash()

try:
    VIEWS.get(current_page(), home_view)()
except AuthenticationRequired as e:
    logger.info("Redirecting to login after %s %s", e.method, e.path)
    drop_controllers()
    navigate(handle_session_expiry(st.session_state.session))
