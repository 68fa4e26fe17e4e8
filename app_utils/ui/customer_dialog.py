from __future__ import annotations
"""Modal dialog for creating a new customer."""

import streamlit as st

from app_utils.customer_controller import CustomerPageController
from app_utils.form_state import FIELDS

INPUT_KEY = "new_customer_{field}"

# (field, label, placeholder) in display order
_INPUTS = [
    ("first_name", "First Name *", "First Name *"),
    ("last_name", "Last Name *", "Last Name *"),
    ("business_name", "Business Name", "Business Name"),
    ("email", "Email Address *", "Email Address *"),
]


def clear_inputs() -> None:
    """Drop widget values so the next render starts from the reset draft."""
    for field in FIELDS:
        st.session_state.pop(INPUT_KEY.format(field=field), None)


def _render_inputs(controller: CustomerPageController) -> None:
    draft = controller.form.draft
    cols = list(st.columns(3)) + [st]
    for col, (field, label, placeholder) in zip(cols, _INPUTS):
        key = INPUT_KEY.format(field=field)
        st.session_state.setdefault(key, getattr(draft, field))
        value = col.text_input(
            label,
            key=key,
            placeholder=placeholder,
            label_visibility="collapsed",
        )
        controller.form.set_field(field, value)


def open_new_customer_dialog(controller: CustomerPageController) -> None:
    """Open modal to add a customer and refresh list on save."""

    @st.dialog("Add Customer", width="medium")
    def _dialog() -> None:
        _render_inputs(controller)

        error_box = st.empty()
        if controller.submit_error_text:
            error_box.error(controller.submit_error_text)

        cancel_col, create_col = st.columns(2)
        if cancel_col.button("Cancel", key="new_customer_cancel"):
            controller.cancel()
            clear_inputs()
            st.rerun()
        if create_col.button(
            "Create",
            key="new_customer_create",
            type="primary",
            disabled=not controller.can_submit,
        ):
            with st.spinner("Saving customer..."):
                ok = controller.submit()
            if ok:
                clear_inputs()
                st.rerun()
            else:
                error_box.error(controller.submit_error_text)

    _dialog()
