"""
ui_utils.py  – Shared page styling & customer table helpers
-----------------------------------------------------------

• apply_global_css() injects the page stylesheet once per run.
• section_card() wraps st.* calls in a styled, titled card.
• customers_frame() turns the customer list into the table shown on the
  page (Name / Email, indexed by email).
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List

import pandas as pd
import streamlit as st

from schemas.customer import Customer

logger = logging.getLogger(__name__)

TABLE_COLUMNS = ["Name", "Email"]


def apply_global_css() -> None:
    st.markdown(
        """
        <style>
        :root { --gap: 10px; }

        .block-container { padding-top: 48px; max-width: 960px; }

        [data-testid="stVerticalBlock"] { gap: var(--gap) !important; }

        .card-title { margin: 0; font-weight: 600; font-size: 1.15rem; }
        </style>
        """,
        unsafe_allow_html=True,
    )


@contextmanager
def section_card(title: str) -> Iterator[None]:
    """Bordered card with a bold heading; st.* calls inside land in the card."""
    with st.container(border=True):
        st.markdown(f"<div class='card-title'>{title}</div>", unsafe_allow_html=True)
        yield


def customers_heading(customers: List[Customer] | None) -> str:
    return f"{len(customers)} Customers" if customers is not None else "Customers"


def customers_frame(customers: List[Customer]) -> pd.DataFrame:
    """Table rows in server order, keyed by email."""
    df = pd.DataFrame(
        [{"Name": c.full_name, "Email": c.email} for c in customers],
        columns=TABLE_COLUMNS,
    )
    dupes = df["Email"][df["Email"].duplicated()].unique().tolist()
    if dupes:
        logger.warning("duplicate customer emails in list: %s", ", ".join(dupes))
    return df.set_index("Email", drop=False)
