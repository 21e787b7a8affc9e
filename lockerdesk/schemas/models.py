from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Status(Enum):
    pending = 'pending'
    approved = 'approved'
    rejected = 'rejected'


class StorageUnit(BaseModel):
    unit_id: int
    occupied: bool
    occupant: Optional[str] = None
    occupant_label: Optional[str] = None
    occupied_at: Optional[datetime] = None


class StorageRequest(BaseModel):
    request_id: str
    requestor: str
    requestor_label: str
    status: Status
    assigned_unit: Optional[int] = None
    created_at: datetime
    processed_at: Optional[datetime] = None


class Statistics(BaseModel):
    total_units: int
    occupied_units: int
    available_units: int
    pending_requests: int


class AssignStorageBody(BaseModel):
    request_id: str = Field(min_length=1)
    unit_id: int = Field(ge=1)


class AssignStorageResult(BaseModel):
    message: str
    request_id: str
    unit_id: int
    requestor_label: str
    access_code: str
    occupied_at: datetime


class RejectRequestBody(BaseModel):
    request_id: str = Field(min_length=1)


class RejectRequestResult(BaseModel):
    message: str
    request: StorageRequest


class ReleaseStorageBody(BaseModel):
    unit_id: int = Field(ge=1)
    access_code: str = Field(min_length=1, max_length=32)


class ReleaseStorageResult(BaseModel):
    message: str
    unit_id: int
    occupant_label: Optional[str] = None


class SubmitRequestResult(BaseModel):
    message: str
    request: StorageRequest


class MyStorage(BaseModel):
    storage: Optional[StorageUnit] = None
    access_code: Optional[str] = None
    pending_request: bool


class LibraryLoginBody(BaseModel):
    password: str = Field(min_length=1)


class TokenResult(BaseModel):
    token: str
    token_type: str = 'bearer'
