from typing import List, Optional
from fastapi import APIRouter, Query, status

from busline.api.v1.schemas.attendance_schemas import (
    SubjectIn, SubjectOut, AttendanceIn, AttendanceOut
)
from busline.deps import AttendanceServiceDep, CurrentUserDep
from busline.security import owner_id_of


router = APIRouter()


@router.post("/subjects", response_model=SubjectOut, status_code=status.HTTP_201_CREATED)
async def add_subject(payload: SubjectIn, service: AttendanceServiceDep, user: CurrentUserDep):
    """Create a subject for the current session"""
    subject = await service.add_subject(owner_id_of(user), payload.name)
    return SubjectOut.model_validate(subject)


@router.get("/subjects", response_model=List[SubjectOut])
async def list_subjects(service: AttendanceServiceDep, user: CurrentUserDep):
    """Subjects of the current session, alphabetical"""
    subjects = await service.list_subjects(owner_id_of(user))
    return [SubjectOut.model_validate(s) for s in subjects]


@router.post("/records", response_model=AttendanceOut, status_code=status.HTTP_201_CREATED)
async def mark_attendance(payload: AttendanceIn, service: AttendanceServiceDep, user: CurrentUserDep):
    """Record attendance for one subject on one day"""
    record = await service.mark_attendance(
        owner_id_of(user),
        payload.subject_id,
        payload.date,
        payload.status,
    )
    return AttendanceOut.model_validate(record)


@router.get("/records", response_model=List[AttendanceOut])
async def list_records(
    service: AttendanceServiceDep,
    user: CurrentUserDep,
    subject_id: Optional[str] = Query(None, min_length=1),
):
    """Attendance history of the current session, newest first"""
    records = await service.list_records(owner_id_of(user), subject_id=subject_id)
    return [AttendanceOut.model_validate(r) for r in records]
