from typing import Optional
import datetime as dt
from pydantic import BaseModel, Field

from busline.domain import AttendanceStatus


class SubjectIn(BaseModel):
    """Schema for creating a subject"""
    name: str = Field(..., min_length=1, max_length=120)


class SubjectOut(BaseModel):
    id: str
    name: str
    created_at: Optional[dt.datetime] = None

    model_config = {
        "from_attributes": True,
    }


class AttendanceIn(BaseModel):
    """Schema for marking attendance"""
    subject_id: str = Field(..., min_length=1)
    date: dt.date
    status: AttendanceStatus


class AttendanceOut(BaseModel):
    id: str
    subject_id: str
    subject_name: str
    date: dt.date
    status: AttendanceStatus
    created_at: Optional[dt.datetime] = None

    model_config = {
        "from_attributes": True,
    }
