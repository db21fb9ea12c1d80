"""Intervention domain schemas - Pydantic models for validation"""

import json
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator


class ClientInfo(BaseModel):
    """Client block printed on the report and used for dispatch"""

    firstName: str
    lastName: str
    address: str = ""
    phone: str = ""
    email: str = ""

    class Config:
        frozen = True
        from_attributes = True

    @field_validator("address", "phone", "email", mode="before")
    @classmethod
    def empty_when_missing(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    @property
    def full_name(self) -> str:
        return f"{self.firstName} {self.lastName}".strip()


class ReportRecord(BaseModel):
    """One maintenance intervention plus its client, as rendered in the PDF"""

    id: str
    description: str
    date: datetime
    nextVisit: Optional[datetime] = None
    notes: Optional[str] = None
    photos: list[str] = []
    signature: Optional[str] = None
    client: ClientInfo

    class Config:
        frozen = True
        from_attributes = True

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        if v is None:
            raise ValueError("Report id is required")
        return str(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        if not v or not v.strip():
            raise ValueError("Description is required")
        return v

    @field_validator("notes", "signature", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("photos", mode="before")
    @classmethod
    def parse_photos(cls, v: Any):
        """Accept a list of payloads or the JSON array string stored by the data layer"""
        if v is None or v == "":
            return []
        if isinstance(v, str):
            try:
                v = json.loads(v)
            except json.JSONDecodeError as e:
                raise ValueError("Photos must be a JSON array of image payloads") from e
        if not isinstance(v, (list, tuple)):
            raise ValueError("Photos must be a list of image payloads")
        return [p for p in v if p]


class ReportDispatchResult(BaseModel):
    """
    Outcome of generate-and-send.

    Truthy only on success, so callers that only need a boolean can keep
    using it as one. ``stage`` names the step that failed:
    "missing_email", "render" or "send".
    """

    success: bool
    stage: Optional[str] = None
    error: Optional[str] = None
    filename: Optional[str] = None

    def __bool__(self) -> bool:
        return self.success
