# widgets.py
import html

import streamlit as st

# -------------------- Style (Light CSS) --------------------
_DEF_CSS = """
<style>
.h-center { text-align:center; }

/* Role pills */
.badge {
  display:inline-block; padding:2px 10px; margin:0 4px 4px 0; border-radius:12px;
  font-size:12px; font-weight:600; color:white; background:#1a73e8;
}
.badge-admin { background:#c62828; }

/* Table header */
.header-row {
  padding:8px 10px; border-radius:6px; background:#e9efff; font-weight:700;
}
</style>
"""


def inject_styles():
    st.markdown(_DEF_CSS, unsafe_allow_html=True)


def button(label, key, busy=False, disabled=False, kind="primary"):
    """Button that shows a busy label and refuses clicks while busy or disabled."""
    return st.button(
        "⏳ Loading..." if busy else label,
        key=key,
        type="primary" if kind == "primary" else "secondary",
        disabled=busy or disabled,
        use_container_width=True,
    )


def labeled_input(label, value, key, error=None, password=False, disabled=False,
                  placeholder=None, required=False):
    text = st.text_input(
        f"{label} *" if required else label,
        value=value or "",
        key=key,
        type="password" if password else "default",
        disabled=disabled,
        placeholder=placeholder,
    )
    if error:
        st.caption(f":red[{error}]")
    return text


def field_error(error):
    if error:
        st.caption(f":red[{error}]")


def alert(kind, text):
    if not text:
        return
    if kind == "success":
        st.success(text)
    else:
        st.error(text)


def banners(form):
    alert("error", form.error)
    alert("success", form.success)


def role_badges(roles):
    pills = "".join(
        f"<span class='badge{' badge-admin' if r == 'Admin' else ''}'>{html.escape(r)}</span>"
        for r in roles
    )
    st.markdown(pills or "—", unsafe_allow_html=True)


def confirmation_dialog(request, busy, on_confirm, on_close, key,
                        confirm_label="Confirm", cancel_label="Cancel"):
    """Renders the pending destructive action; nothing when there is none."""
    if request is None:
        return
    with st.container(border=True):
        st.markdown(f"#### ⚠️ {request.title}")
        st.write(request.message)
        col_ok, col_cancel = st.columns(2)
        with col_ok:
            if button(confirm_label, key=f"{key}_confirm", busy=busy):
                on_confirm()
                st.rerun()
        with col_cancel:
            if button(cancel_label, key=f"{key}_cancel", disabled=busy, kind="secondary"):
                on_close()
                st.rerun()
