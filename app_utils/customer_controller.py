from __future__ import annotations

"""
Add-customer dialog state machine
---------------------------------

    CLOSED ──open_dialog──▶ OPEN ──submit──▶ SUBMITTING
       ▲                    │  ▲                 │
       └──────cancel────────┘  └────failure──────┤
       └──────────────────success────────────────┘

• cancel resets the form.
• success revalidates the list and waits for it, resets the form, closes
  the dialog and shows a timed notice.
• failure keeps the dialog open with the draft untouched and records the
  error for display; the list is not refetched.

Only the page script thread drives this object.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from app_utils.customer_api import ApiRequestError, create_customer
from app_utils.customer_store import CustomerListStore
from app_utils.form_state import FormState
from schemas.customer import ApiError, Customer, CustomerDraft

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Customer added successfully!"

Creator = Callable[[str, CustomerDraft], Optional[Customer]]


class DialogState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    SUBMITTING = "submitting"


class DialogStateError(RuntimeError):
    """An action was requested from a state that does not allow it."""


@dataclass(frozen=True)
class Notice:
    message: str
    expires_at: float


class CustomerPageController:
    def __init__(
        self,
        store: CustomerListStore,
        form: FormState | None = None,
        create: Creator = create_customer,
        clock: Callable[[], float] = time.monotonic,
        notice_seconds: float = 3.0,
        revalidate_timeout: float | None = None,
    ) -> None:
        self.store = store
        self.form = form or FormState()
        self._create = create
        self._clock = clock
        self.notice_seconds = notice_seconds
        self.revalidate_timeout = revalidate_timeout
        self.dialog_state = DialogState.CLOSED
        self.submit_error: Optional[ApiError] = None
        self._notice: Optional[Notice] = None

    @property
    def dialog_open(self) -> bool:
        return self.dialog_state is not DialogState.CLOSED

    @property
    def can_submit(self) -> bool:
        return self.dialog_state is DialogState.OPEN and self.form.is_valid()

    @property
    def submit_error_text(self) -> Optional[str]:
        if self.submit_error is None:
            return None
        return f"Failed to add customer: {self.submit_error.message}"

    def open_dialog(self) -> None:
        if self.dialog_state is DialogState.SUBMITTING:
            raise DialogStateError("cannot open the dialog while submitting")
        self.dialog_state = DialogState.OPEN

    def cancel(self) -> None:
        if self.dialog_state is not DialogState.OPEN:
            raise DialogStateError(f"cannot cancel from {self.dialog_state.value}")
        self.form.reset()
        self.submit_error = None
        self.dialog_state = DialogState.CLOSED

    def submit(self) -> bool:
        """Create the customer from the current draft; True on success.

        Raises ``DraftValidationError`` before touching the network when a
        required field is blank.
        """
        if self.dialog_state is not DialogState.OPEN:
            raise DialogStateError(f"cannot submit from {self.dialog_state.value}")
        draft = self.form.require_valid()

        self.dialog_state = DialogState.SUBMITTING
        self.submit_error = None
        try:
            created = self._create(self.store.url, draft)
        except ApiRequestError as err:
            logger.warning("create customer failed: %s %s", err.code, err.message)
            self.submit_error = err.error
            self.dialog_state = DialogState.OPEN
            return False
        except Exception:
            self.dialog_state = DialogState.OPEN
            raise

        logger.info("created customer %s", created.email if created else draft.email)
        try:
            self.store.revalidate().result(timeout=self.revalidate_timeout)
        except Exception as err:  # noqa: BLE001
            # The create already succeeded; the dialog still closes
            logger.error("list refresh after create failed: %s", err, exc_info=True)
        self.form.reset()
        self.dialog_state = DialogState.CLOSED
        self._notice = Notice(SUCCESS_MESSAGE, self._clock() + self.notice_seconds)
        return True

    def active_notice(self) -> Optional[Notice]:
        """Current notice, or None once its duration has elapsed."""
        if self._notice is not None and self._clock() >= self._notice.expires_at:
            self._notice = None
        return self._notice

    def dismiss_notice(self) -> None:
        self._notice = None
