"""
Customer Console – Streamlit entrypoint
---------------------------------------

Key features
• Lists customers from the backend (GET CUSTOMERS_API_URL) in server order.
• "Add Customer" opens a modal form; Create is enabled only when first
  name, last name and email are filled in.
• A successful create refetches the list, resets the form, closes the
  dialog and shows a short-lived success notice.
• A failed create keeps the dialog open with the typed values and shows
  the backend's message.

The list store and dialog controller live in st.session_state for the
lifetime of the browser session; switching CUSTOMERS_API_URL tears the old
store down and mounts a new one.
"""

from __future__ import annotations

import logging
import threading
from functools import partial

import streamlit as st

from app_utils.config import (
    api_timeout,
    api_url,
    configure_logging,
    notice_seconds,
    page_title,
)
from app_utils.customer_api import create_customer, list_customers
from app_utils.customer_controller import CustomerPageController
from app_utils.customer_store import CustomerListStore
from app_utils.ui.customer_dialog import open_new_customer_dialog
from app_utils.ui_utils import (
    apply_global_css,
    customers_frame,
    customers_heading,
    section_card,
)

CONTROLLER_KEY = "customer_page"
NOTICE_POLL_SECONDS = 0.5

logger = logging.getLogger(__name__)


def mount_controller(url: str) -> CustomerPageController:
    """Return the session's controller, creating its store on first use."""
    controller: CustomerPageController | None = st.session_state.get(CONTROLLER_KEY)
    if controller is not None and controller.store.url != url:
        logger.info("customers endpoint changed to %s; remounting", url)
        controller.store.close()
        controller = None
    if controller is None:
        timeout = api_timeout()
        store = CustomerListStore(url, loader=partial(list_customers, timeout=timeout))
        controller = CustomerPageController(
            store,
            create=partial(create_customer, timeout=timeout),
            notice_seconds=notice_seconds(),
            revalidate_timeout=timeout + 1,
        )
        st.session_state[CONTROLLER_KEY] = controller
    return controller


def wait_for_list(store: CustomerListStore, timeout: float | None) -> None:
    """Block until the pending GET settles (or ``timeout``)."""
    changed = threading.Event()
    unsubscribe = store.subscribe(lambda _state: changed.set())
    try:
        while store.state.validating:
            if not changed.wait(timeout):
                break
            changed.clear()
    finally:
        unsubscribe()


def main() -> None:
    configure_logging()
    st.set_page_config(page_title=page_title(), layout="centered")
    apply_global_css()

    controller = mount_controller(api_url())
    store = controller.store
    store.mount()
    state = store.state

    with section_card(customers_heading(state.data)):
        add_col, refresh_col = st.columns([4, 1])
        add_clicked = add_col.button("➕ Add Customer", type="primary")
        if refresh_col.button("↻ Refresh", disabled=state.validating):
            store.revalidate()
            state = store.state

        if state.is_loading:
            st.write("Loading...")
        elif state.error is not None:
            st.error(f"Error: {state.error.message}")
        elif state.data is not None:
            st.dataframe(
                customers_frame(state.data),
                hide_index=True,
                use_container_width=True,
            )

    if add_clicked:
        controller.open_dialog()
        open_new_customer_dialog(controller)

    @st.fragment(run_every=NOTICE_POLL_SECONDS)
    def _notice_area() -> None:
        notice = controller.active_notice()
        if notice is not None:
            st.success(notice.message)

    _notice_area()

    # Covers the first load and manual refreshes alike
    if state.validating:
        wait_for_list(store, api_timeout() + 1)
        st.rerun()


main()
