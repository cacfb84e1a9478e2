from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from busline.core import BaseRepository
from busline.models import SubjectRow, AttendanceRow


class SubjectRepository(BaseRepository[SubjectRow]):
    """Subject repository implementation"""

    def __init__(self, session: AsyncSession):
        super().__init__(SubjectRow, session)

    async def get_by_owner(self, owner_id: str) -> List[SubjectRow]:
        """Get subjects created by one session identity"""
        return await self.get_multi(filters={"owner_id": owner_id})


class AttendanceRepository(BaseRepository[AttendanceRow]):
    """Attendance record repository implementation"""

    def __init__(self, session: AsyncSession):
        super().__init__(AttendanceRow, session)

    async def get_by_owner(self, owner_id: str) -> List[AttendanceRow]:
        """Get attendance records written by one session identity"""
        query = select(AttendanceRow).where(AttendanceRow.owner_id == owner_id).order_by(AttendanceRow.seq)
        result = await self.session.execute(query)
        return list(result.scalars().all())
