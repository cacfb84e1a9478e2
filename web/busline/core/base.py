from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional, List, Any, Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import DeclarativeBase

ModelType = TypeVar('ModelType', bound=DeclarativeBase)


class IRepository(ABC, Generic[ModelType]):
    """Base repository interface. Rows are append-only, so no update/delete."""

    @abstractmethod
    async def get(self, id: Any) -> Optional[ModelType]:
        """Get row by primary key"""
        pass

    @abstractmethod
    async def get_multi(self, *, filters: Optional[Dict[str, Any]] = None) -> List[ModelType]:
        """Get rows matching column filters"""
        pass

    @abstractmethod
    async def create(self, *, obj_in: Dict[str, Any]) -> ModelType:
        """Create new row"""
        pass


class BaseRepository(IRepository[ModelType], Generic[ModelType]):
    """Base repository implementation with common read/insert operations"""

    def __init__(self, model: type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def get(self, id: Any) -> Optional[ModelType]:
        """Get row by primary key"""
        return await self.session.get(self.model, id)

    async def get_multi(self, *, filters: Optional[Dict[str, Any]] = None) -> List[ModelType]:
        """Get rows whose columns equal the given filter values"""
        query = select(self.model)
        if filters:
            for key, value in filters.items():
                if hasattr(self.model, key):
                    query = query.where(getattr(self.model, key) == value)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def create(self, *, obj_in: Dict[str, Any]) -> ModelType:
        """Insert a row and load the values the database assigned"""
        db_obj = self.model(**obj_in)
        self.session.add(db_obj)
        await self.session.flush()
        # Pull server defaults (created_at, seq) back into the instance
        await self.session.refresh(db_obj)
        return db_obj
