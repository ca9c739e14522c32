# admin_dashboard.py
import html

import matplotlib.pyplot as plt
import streamlit as st

from controllers import AdminController
from navigation import controller_for, follow_redirect, navigate
import widgets

CELL_STYLE = "padding:6px 8px;"


def _navbar(c):
    st.sidebar.markdown("## 📋 Navigation")
    nav_buttons = {
        "👥 Users": "users",
        "🏷️ Roles": "roles",
        "📊 Overview": "overview",
        "🙋 My Dashboard": "dashboard",
        "🚪 Logout": "logout",
    }

    for i, (label, target) in enumerate(nav_buttons.items()):
        if st.sidebar.button(label, key=f"admin_nav_btn_{i}"):
            if target == "logout":
                c.logout()
                follow_redirect(c)
            elif target == "dashboard":
                navigate("dashboard")
            else:
                c.set_tab(target)


# -------------------- Users --------------------
def _users_tab(c):
    st.subheader(f"👥 All Users ({len(c.users)})")
    if not c.users:
        st.info("No users found.")
        return

    widths = [2.0, 2.6, 1.4, 2.4, 1.0]
    for col, title in zip(st.columns(widths), ["Name", "Email", "Country", "Roles", "Action"]):
        col.markdown(f"<div class='header-row'>{title}</div>", unsafe_allow_html=True)

    for user in c.users:
        c1, c2, c3, c4, c5 = st.columns(widths)
        c1.markdown(f"<div style='{CELL_STYLE}'>{html.escape(user.full_name)}</div>",
                    unsafe_allow_html=True)
        c2.markdown(f"<div style='{CELL_STYLE}'>{html.escape(user.email)}</div>",
                    unsafe_allow_html=True)
        c3.markdown(f"<div style='{CELL_STYLE}'>{html.escape(user.country or '-')}</div>",
                    unsafe_allow_html=True)
        with c4:
            widgets.role_badges(user.roles)
        with c5:
            busy = c.deleting_user_id == user.user_id
            if widgets.button("🗑️ Delete", key=f"del_user_{user.user_id}", busy=busy,
                              disabled=not c.can_delete_user(user), kind="secondary"):
                c.request_delete_user(user)
                st.rerun()


# -------------------- Roles --------------------
def _create_role_form(c):
    form = c.create_form
    rev = form.revision
    with st.container(border=True):
        st.markdown("#### ➕ Create Role")
        c.change_create_field("name", widgets.labeled_input(
            "Role Name", form.values.get("name"), key=f"new_role_name_{rev}",
            required=True, disabled=c.creating_role))
        c.change_create_field("description", st.text_area(
            "Description", value=form.values.get("description") or "",
            key=f"new_role_desc_{rev}", disabled=c.creating_role))
        col1, col2 = st.columns(2)
        with col1:
            if widgets.button("Create", key="btn_create_role", busy=c.creating_role):
                c.create_role()
                st.rerun()
        with col2:
            if widgets.button("Cancel", key="btn_cancel_create_role", kind="secondary",
                              disabled=c.creating_role):
                c.close_create_role()
                st.rerun()


def _edit_role_form(c):
    form = c.edit_form
    rev = form.revision
    with st.container(border=True):
        st.markdown(f"#### ✏️ Edit Role: {html.escape(c.editing_role.name)}")
        c.change_edit_field("name", widgets.labeled_input(
            "Role Name", form.values.get("name"), key=f"edit_role_name_{rev}",
            required=True, disabled=c.updating_role))
        c.change_edit_field("description", st.text_area(
            "Description", value=form.values.get("description") or "",
            key=f"edit_role_desc_{rev}", disabled=c.updating_role))
        col1, col2 = st.columns(2)
        with col1:
            if widgets.button("Update", key="btn_update_role", busy=c.updating_role):
                c.update_role()
                st.rerun()
        with col2:
            if widgets.button("Cancel", key="btn_cancel_edit_role", kind="secondary",
                              disabled=c.updating_role):
                c.close_edit_role()
                st.rerun()


def _roles_tab(c):
    head, action = st.columns([3, 1])
    head.subheader(f"🏷️ Roles ({len(c.roles)})")
    with action:
        if widgets.button("➕ New Role", key="btn_open_create_role",
                          disabled=c.show_create_role):
            c.open_create_role()
            st.rerun()

    if c.show_create_role:
        _create_role_form(c)
    if c.editing_role is not None:
        _edit_role_form(c)

    if not c.roles:
        st.info("No roles defined.")
        return

    widths = [2.0, 3.6, 1.0, 1.0, 1.0]
    for col, title in zip(st.columns(widths), ["Name", "Description", "Users", "", ""]):
        col.markdown(f"<div class='header-row'>{title or '&nbsp;'}</div>",
                     unsafe_allow_html=True)

    for role in c.roles:
        c1, c2, c3, c4, c5 = st.columns(widths)
        label = f"{role.name} 🔒" if role.is_system else role.name
        c1.markdown(f"<div style='{CELL_STYLE}'>{html.escape(label)}</div>",
                    unsafe_allow_html=True)
        c2.markdown(f"<div style='{CELL_STYLE}'>{html.escape(role.description or '')}</div>",
                    unsafe_allow_html=True)
        c3.markdown(f"<div style='{CELL_STYLE}'>"
                    f"{'' if role.user_count is None else role.user_count}</div>",
                    unsafe_allow_html=True)
        # system roles get no edit/delete controls at all
        if not c.can_edit_role(role):
            continue
        with c4:
            if widgets.button("✏️ Edit", key=f"edit_role_{role.role_id}", kind="secondary"):
                c.edit_role(role)
                st.rerun()
        with c5:
            busy = c.deleting_role_id == role.role_id
            if widgets.button("🗑️ Delete", key=f"del_role_{role.role_id}", busy=busy,
                              disabled=not c.can_delete_role(role), kind="secondary"):
                c.request_delete_role(role)
                st.rerun()


# -------------------- Overview --------------------
def _overview_tab(c):
    st.subheader("📊 Overview")
    col1, col2, col3 = st.columns(3)
    col1.metric("👥 Users", len(c.users))
    col2.metric("🏷️ Roles", len(c.roles))
    col3.metric("🛡️ Admins", sum(1 for u in c.users if u.is_admin))

    rows = c.role_distribution()
    if not rows:
        st.info("No roles to chart.")
        return

    st.markdown("### Users per Role")
    names = [name for name, _ in rows]
    counts = [count for _, count in rows]
    fig, ax = plt.subplots(figsize=(6, 2.5))
    ax.bar(names, counts, color="#1a73e8")
    ax.set_ylabel("Users")
    ax.tick_params(axis="x", labelrotation=20)
    st.pyplot(fig)
    plt.close(fig)


# -------------------- Entry --------------------
def admin_dashboard():
    c = controller_for("admin", AdminController)
    target = c.guard()
    if target:
        navigate(target)

    if c.loading:
        with st.spinner("Loading admin panel..."):
            c.load()

    c.tick()
    _navbar(c)

    st.markdown("<h1 class='h-center'>Admin Panel</h1>", unsafe_allow_html=True)
    widgets.banners(c.form)

    widgets.confirmation_dialog(
        c.confirmation,
        busy=c.deleting,
        on_confirm=c.confirm,
        on_close=c.cancel_confirmation,
        key="admin_confirm",
        confirm_label="Delete",
    )

    if c.tab == "roles":
        _roles_tab(c)
    elif c.tab == "overview":
        _overview_tab(c)
    else:
        _users_tab(c)
