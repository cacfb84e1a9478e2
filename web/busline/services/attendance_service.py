"""Attendance tracking: per-owner subjects and immutable daily marks."""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Union

from ..core import NotFoundError, ValidationError
from ..domain import AttendanceRecord, AttendanceStatus, Subject
from .interfaces import ISubjectStore, IAttendanceLog


class AttendanceService:
    def __init__(self, subjects: ISubjectStore, log: IAttendanceLog):
        self.subjects = subjects
        self.log = log

    async def add_subject(self, owner_id: str, name: str) -> Subject:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Subject name is required", field="name")
        return await self.subjects.add(Subject(owner_id=owner_id, name=name))

    async def list_subjects(self, owner_id: str) -> List[Subject]:
        subjects = await self.subjects.list_by_owner(owner_id)
        return sorted(subjects, key=lambda s: (s.name.lower(), s.id))

    async def mark_attendance(
        self,
        owner_id: str,
        subject_id: str,
        day: Union[date, str],
        status: Union[AttendanceStatus, str],
    ) -> AttendanceRecord:
        """Record one attendance mark.

        The subject's current name is copied onto the record so later renames
        or deletions do not rewrite history.
        """
        try:
            status = AttendanceStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in AttendanceStatus)
            raise ValidationError(f"Status must be one of {allowed}", field="status")

        if not isinstance(day, date):
            try:
                day = date.fromisoformat(str(day or "").strip())
            except ValueError:
                raise ValidationError("Date must be YYYY-MM-DD", field="date")

        subject = await self.subjects.get(subject_id) if subject_id else None
        # Someone else's subject looks exactly like a missing one
        if subject is None or subject.owner_id != owner_id:
            raise NotFoundError("Subject", subject_id)

        return await self.log.append(
            AttendanceRecord(
                owner_id=owner_id,
                subject_id=subject.id,
                subject_name=subject.name,
                date=day,
                status=status,
            )
        )

    async def list_records(
        self, owner_id: str, subject_id: Optional[str] = None
    ) -> List[AttendanceRecord]:
        """Owner's attendance marks, newest first"""
        records = await self.log.list_by_owner(owner_id)
        if subject_id:
            records = [r for r in records if r.subject_id == subject_id]
        return sorted(records, key=lambda r: r.seq, reverse=True)
