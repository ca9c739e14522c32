# navigation.py
import streamlit as st

PAGES = ("home", "login", "register", "dashboard", "admin")


def current_page():
    return st.session_state.get("page", "home")


def navigate(page, flash=None):
    """Switch page; the target page's controller is rebuilt on its next render."""
    if page not in PAGES:
        page = "home"
    st.session_state.page = page
    st.session_state.get("controllers", {}).pop(page, None)
    if flash:
        st.session_state.flash = flash
    st.rerun()


def follow_redirect(controller):
    target = controller.redirect
    if target:
        controller.redirect = None
        navigate(target, flash=controller.form.success or None)


def show_flash():
    flash = st.session_state.pop("flash", None)
    if flash:
        st.toast(flash, icon="✅")


def controller_for(page, cls):
    """One controller per page per browser session."""
    controllers = st.session_state.setdefault("controllers", {})
    if page not in controllers:
        controllers[page] = cls(st.session_state.api, st.session_state.session)
    return controllers[page]


def drop_controllers():
    st.session_state.controllers = {}
