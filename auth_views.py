# auth_views.py
import streamlit as st

from controllers import LoginController, RegisterController
from countries import COUNTRIES, country_name
from navigation import controller_for, follow_redirect, navigate
import widgets


# -------------------- Home --------------------
def home_view():
    if st.session_state.session.is_logged_in():
        navigate("dashboard")

    st.markdown("<h1 class='h-center'>👥 UserHub</h1>", unsafe_allow_html=True)
    st.markdown(
        "<p class='h-center'>Register once, manage your profile and roles, "
        "and let administrators keep the directory tidy.</p>",
        unsafe_allow_html=True,
    )

    col1, col2 = st.columns(2)
    with col1:
        if widgets.button("Sign In", key="home_sign_in", kind="secondary"):
            navigate("login")
    with col2:
        if widgets.button("Get Started", key="home_get_started"):
            navigate("register")


# -------------------- Login --------------------
def login_view():
    c = controller_for("login", LoginController)
    target = c.guard()
    if target:
        navigate(target)

    st.markdown("<h2 class='h-center'>Welcome Back</h2>", unsafe_allow_html=True)
    st.write("<p class='h-center'>Sign in to your account</p>", unsafe_allow_html=True)

    widgets.banners(c.form)

    form = c.form
    locked = form.submitting or bool(form.success)
    rev = form.revision
    email = widgets.labeled_input(
        "Email Address", form.values["email"], key=f"login_email_{rev}",
        error=form.error_for("email"), placeholder="john@example.com",
        required=True, disabled=locked,
    )
    c.change("email", email)
    password = widgets.labeled_input(
        "Password", form.values["password"], key=f"login_password_{rev}",
        error=form.error_for("password"), password=True, required=True, disabled=locked,
    )
    c.change("password", password)

    if widgets.button("Sign In", key="btn_login", busy=c.form.submitting, disabled=locked):
        c.submit()
        follow_redirect(c)
        st.rerun()

    st.write("")
    col1, col2 = st.columns([0.7, 0.3])
    with col1:
        st.caption("Don't have an account?")
    with col2:
        if st.button("Sign up →", key="go_register"):
            navigate("register")


# -------------------- Register --------------------
def register_view():
    c = controller_for("register", RegisterController)
    target = c.guard()
    if target:
        navigate(target)
    if not c.loaded:
        c.load()

    st.markdown("<h2 class='h-center'>Create Account</h2>", unsafe_allow_html=True)
    widgets.banners(c.form)

    form = c.form
    rev = form.revision
    locked = form.submitting

    col1, col2 = st.columns(2)
    with col1:
        c.change("firstName", widgets.labeled_input(
            "First Name", form.values["firstName"], key=f"reg_first_{rev}",
            error=form.error_for("firstName"), required=True, disabled=locked))
    with col2:
        c.change("lastName", widgets.labeled_input(
            "Last Name", form.values["lastName"], key=f"reg_last_{rev}",
            error=form.error_for("lastName"), required=True, disabled=locked))

    c.change("email", widgets.labeled_input(
        "Email Address", form.values["email"], key=f"reg_email_{rev}",
        error=form.error_for("email"), placeholder="john@example.com",
        required=True, disabled=locked))

    col1, col2 = st.columns(2)
    with col1:
        c.change("password", widgets.labeled_input(
            "Password", form.values["password"], key=f"reg_password_{rev}",
            error=form.error_for("password"), password=True, required=True, disabled=locked))
    with col2:
        c.change("confirmPassword", widgets.labeled_input(
            "Confirm Password", form.values["confirmPassword"], key=f"reg_confirm_{rev}",
            error=form.error_for("confirmPassword"), password=True, required=True,
            disabled=locked))

    col1, col2 = st.columns(2)
    with col1:
        c.change("phoneNumber", widgets.labeled_input(
            "Phone Number", form.values["phoneNumber"], key=f"reg_phone_{rev}",
            error=form.error_for("phoneNumber"), placeholder="+14155551234",
            disabled=locked))
    with col2:
        codes = [""] + [code for code, _ in COUNTRIES]
        current = form.values["country"]
        country = st.selectbox(
            "Country *", codes,
            index=codes.index(current) if current in codes else 0,
            format_func=lambda code: country_name(code) if code else "Select a country",
            key=f"reg_country_{rev}", disabled=locked,
        )
        widgets.field_error(form.error_for("country"))
        c.change("country", country)

    role_names = [r.name for r in c.roles]
    selected = st.multiselect(
        "Roles *", role_names,
        default=[r for r in form.values["roles"] if r in role_names],
        key=f"reg_roles_{rev}", disabled=locked,
    )
    widgets.field_error(form.error_for("roles"))
    if selected != form.values["roles"]:
        c.change("roles", selected)

    if widgets.button("Create Account", key="btn_register", busy=c.form.submitting):
        c.submit()
        follow_redirect(c)
        st.rerun()

    st.write("")
    col1, col2 = st.columns([0.7, 0.3])
    with col1:
        st.caption("Already have an account?")
    with col2:
        if st.button("← Sign in", key="go_login"):
            navigate("login")
