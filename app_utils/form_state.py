from __future__ import annotations

"""Add-customer form values and the derived submit-enabled signal."""

from typing import List, Tuple

from schemas.customer import CustomerDraft

FIELDS: Tuple[str, ...] = ("first_name", "last_name", "email", "business_name")
REQUIRED_FIELDS: Tuple[str, ...] = ("first_name", "last_name", "email")

FIELD_LABELS = {
    "first_name": "First Name",
    "last_name": "Last Name",
    "email": "Email Address",
    "business_name": "Business Name",
}


class DraftValidationError(ValueError):
    """Submit attempted while a required field is blank."""

    def __init__(self, missing: List[str]) -> None:
        labels = ", ".join(FIELD_LABELS[name] for name in missing)
        super().__init__(f"Missing required fields: {labels}")
        self.missing = missing


class FormState:
    def __init__(self) -> None:
        self._draft = CustomerDraft()

    @property
    def draft(self) -> CustomerDraft:
        return self._draft.model_copy()

    def set_field(self, name: str, value: str) -> None:
        if name not in FIELDS:
            raise KeyError(name)
        setattr(self._draft, name, value)

    def missing_fields(self) -> List[str]:
        return [name for name in REQUIRED_FIELDS if not getattr(self._draft, name).strip()]

    def is_valid(self) -> bool:
        return not self.missing_fields()

    def require_valid(self) -> CustomerDraft:
        """Return the draft, or raise ``DraftValidationError`` if it can't be sent."""
        missing = self.missing_fields()
        if missing:
            raise DraftValidationError(missing)
        return self.draft

    def reset(self) -> None:
        self._draft = CustomerDraft()
