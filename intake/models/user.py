"""Pydantic model for the user document stored in Firestore.

Only these fields are written by the submission workflow; `createdAt` is
stamped by the store at write time and never taken from the caller.
"""
from typing import Any, Dict, Mapping

from pydantic import BaseModel, field_validator

TRUTHY_FLAGS = {"on", "true", "1", "yes"}


class UserRecord(BaseModel):
    id: str
    name: str = ""
    email: str
    mobile: str
    checkbox1: bool = False  # consent checkbox

    # email/mobile are validated stripped, so they are stored stripped too
    @field_validator("id", "name", "email", "mobile", mode="before")
    @classmethod
    def coerce_text(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("checkbox1", mode="before")
    @classmethod
    def coerce_flag(cls, v):
        # HTML checkboxes post "on" when ticked and nothing otherwise
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.strip().lower() in TRUTHY_FLAGS
        if isinstance(v, (int, float)):
            return v == 1
        return False

    @classmethod
    def from_submission(cls, fields: Mapping[str, Any]) -> "UserRecord":
        return cls(
            id=fields.get("id"),
            name=fields.get("name"),
            email=fields.get("email"),
            mobile=fields.get("mobile"),
            checkbox1=fields.get("checkbox1"),
        )

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump()
