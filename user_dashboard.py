# user_dashboard.py
import streamlit as st

from controllers import DashboardController
from countries import COUNTRIES, country_name
from navigation import controller_for, follow_redirect, navigate
import widgets


def _navbar(c):
    st.sidebar.markdown("## 📋 Navigation")
    user = st.session_state.session.get_current_user()
    st.sidebar.caption(f"Signed in as {user['firstName'] or ''} {user['lastName'] or ''}")
    if c.is_admin():
        if st.sidebar.button("🛠️ Admin Panel", key="dash_nav_admin"):
            navigate("admin")
    st.sidebar.write("---")
    if st.sidebar.button("🚪 Logout", key="dash_logout"):
        c.logout()
        follow_redirect(c)


def _profile_card(c):
    user = c.user
    st.subheader("🙋 My Profile")
    st.markdown(f"**Name:** {user.full_name}")
    st.markdown(f"**Email:** {user.email}")
    st.markdown(f"**Phone:** {user.phone_number or 'Not provided'}")
    st.markdown(f"**Country:** {country_name(user.country)}")
    st.markdown("**Roles:**")
    widgets.role_badges(user.roles)
    if user.created_at:
        st.caption(f"Member since {user.created_at[:10]}")

    col1, col2 = st.columns(2)
    with col1:
        if widgets.button("✏️ Edit Profile", key="btn_edit_profile"):
            c.start_edit()
            st.rerun()
    with col2:
        if widgets.button("🔑 Change Password", key="btn_open_password", kind="secondary",
                          disabled=c.show_password_change):
            c.open_password_change()
            st.rerun()


def _edit_form(c):
    form = c.form
    rev = form.revision
    locked = form.submitting
    st.subheader("✏️ Edit Profile")

    col1, col2 = st.columns(2)
    with col1:
        c.change("firstName", widgets.labeled_input(
            "First Name", form.values.get("firstName"), key=f"dash_first_{rev}",
            error=form.error_for("firstName"), required=True, disabled=locked))
    with col2:
        c.change("lastName", widgets.labeled_input(
            "Last Name", form.values.get("lastName"), key=f"dash_last_{rev}",
            error=form.error_for("lastName"), required=True, disabled=locked))

    c.change("email", widgets.labeled_input(
        "Email Address", form.values.get("email"), key=f"dash_email_{rev}",
        error=form.error_for("email"), required=True, disabled=locked))

    col1, col2 = st.columns(2)
    with col1:
        c.change("phoneNumber", widgets.labeled_input(
            "Phone Number", form.values.get("phoneNumber"), key=f"dash_phone_{rev}",
            error=form.error_for("phoneNumber"), disabled=locked))
    with col2:
        codes = [code for code, _ in COUNTRIES]
        current = form.values.get("country")
        if current and current not in codes:
            codes.insert(0, current)
        country = st.selectbox(
            "Country *", codes,
            index=codes.index(current) if current in codes else 0,
            format_func=country_name, key=f"dash_country_{rev}", disabled=locked,
        )
        widgets.field_error(form.error_for("country"))
        c.change("country", country)

    role_names = [r.name for r in c.roles]
    current_roles = form.values.get("roles") or []
    selected = st.multiselect(
        "Roles *", sorted(set(role_names) | set(current_roles)),
        default=current_roles, key=f"dash_roles_{rev}", disabled=locked,
    )
    widgets.field_error(form.error_for("roles"))
    if selected != current_roles:
        c.change("roles", selected)

    col1, col2 = st.columns(2)
    with col1:
        if widgets.button("💾 Save Changes", key="btn_save_profile", busy=locked):
            c.save_profile()
            st.rerun()
    with col2:
        if widgets.button("Cancel", key="btn_cancel_edit", kind="secondary", disabled=locked):
            c.cancel_edit()
            st.rerun()


def _password_form(c):
    form = c.password_form
    rev = form.revision
    locked = form.submitting
    with st.container(border=True):
        st.subheader("🔑 Change Password")
        fields = [
            ("currentPassword", "Current Password"),
            ("newPassword", "New Password"),
            ("confirmNewPassword", "Confirm New Password"),
        ]
        for name, label in fields:
            value = widgets.labeled_input(
                label, form.values.get(name), key=f"pwd_{name}_{rev}",
                error=form.error_for(name), password=True, required=True, disabled=locked)
            c.change_password_field(name, value)

        col1, col2 = st.columns(2)
        with col1:
            if widgets.button("Update Password", key="btn_change_password", busy=locked):
                c.change_password()
                st.rerun()
        with col2:
            if widgets.button("Cancel", key="btn_close_password", kind="secondary",
                              disabled=locked):
                c.close_password_change()
                st.rerun()


def user_dashboard():
    c = controller_for("dashboard", DashboardController)
    target = c.guard()
    if target:
        navigate(target)

    if c.loading:
        with st.spinner("Loading..."):
            c.load()

    c.tick()
    _navbar(c)

    st.markdown("<h1 class='h-center'>Dashboard</h1>", unsafe_allow_html=True)
    widgets.banners(c.form)
    widgets.banners(c.password_form)

    if c.user is None:
        st.info("Profile unavailable. Reload the page to try again.")
        return

    if c.editing:
        _edit_form(c)
    else:
        _profile_card(c)

    if c.show_password_change:
        _password_form(c)
