"""
Pydantic models for the customer console.

The backend speaks camelCase JSON:

    {"firstName": "Ada", "lastName": "Lovelace",
     "email": "ada@example.com", "businessName": "Analytical Engines"}

Python code uses snake_case attributes; every model accepts either form on
input (`populate_by_name`) and serializes by alias.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class ApiError(BaseModel):
    """Structured error payload returned by the backend on non-2xx."""

    code: str
    message: str

    model_config = ConfigDict(extra="allow")


class Customer(BaseModel):
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    business_name: Optional[str] = Field(default=None, alias="businessName")

    # Unknown keys from the API (ids, timestamps) are kept
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @field_validator("first_name", "last_name", "email")
    @classmethod
    def _non_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


CustomerList = List[Customer]
customer_list_adapter: TypeAdapter[List[Customer]] = TypeAdapter(List[Customer])


class CustomerDraft(BaseModel):
    """In-progress form values; every field is a plain string."""

    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    email: str = Field(default="", alias="email")
    business_name: str = Field(default="", alias="businessName")

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    def to_payload(self) -> Dict[str, Any]:
        """Return the POST body; an empty business name is left out."""
        payload = self.model_dump(by_alias=True)
        if not self.business_name:
            payload.pop("businessName")
        return payload
