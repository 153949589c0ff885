"""Persistence adapter for briefs, scoped by owner id."""

from typing import Any, Dict, List, Optional, Union

import structlog
from pydantic import BaseModel
from sqlalchemy import delete, desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models.brief import Brief
from schemas.brief import BriefCreate, BriefResponse, NarrativeUpdate

logger = structlog.get_logger()

NARRATIVE_FIELDS = frozenset({"summary", "pitch_angle", "subject_line", "what_not_to_pitch", "signal_tag"})


class BriefNotFoundError(Exception):
    """No brief with this id is visible to the caller."""
    pass


class BriefPersistenceError(Exception):
    """The store rejected a read or write."""
    pass


def _to_json(value: Any) -> Any:
    if isinstance(value, list):
        return [_to_json(item) for item in value]
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return value


def to_response(brief: Brief) -> BriefResponse:
    """Convert a stored row into its API representation."""
    return BriefResponse.model_validate({name: getattr(brief, name) for name in BriefResponse.model_fields})


class BriefRepository:
    """
    CRUD over the ``briefs`` table.

    Every read, update and delete given an ``owner_id`` only sees rows owned by
    that id. Rows owned by someone else behave exactly like missing rows.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _scoped(statement, brief_id: str, owner_id: Optional[str]):
        statement = statement.where(Brief.id == brief_id)
        if owner_id:
            statement = statement.where(Brief.user_id == owner_id)
        return statement

    async def create(self, brief: BriefCreate, owner_id: Optional[str] = None) -> Brief:
        values = {name: _to_json(getattr(brief, name)) for name in BriefCreate.model_fields}
        record = Brief(**values, user_id=owner_id)
        try:
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to save brief", company=brief.company_name, error=str(e))
            raise BriefPersistenceError(str(e)) from e

        logger.info("Brief saved", brief_id=record.id, company=record.company_name, user_id=owner_id)
        return record

    async def get_all(self, owner_id: Optional[str] = None) -> List[Brief]:
        """All visible briefs, newest first."""
        query = select(Brief).order_by(desc(Brief.created_at))
        if owner_id:
            query = query.where(Brief.user_id == owner_id)
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Failed to list briefs", user_id=owner_id, error=str(e))
            raise BriefPersistenceError(str(e)) from e
        return list(result.scalars().all())

    async def get_by_id(self, brief_id: str, owner_id: Optional[str] = None) -> Optional[Brief]:
        try:
            result = await self.db.execute(self._scoped(select(Brief), brief_id, owner_id))
        except SQLAlchemyError as e:
            logger.error("Failed to load brief", brief_id=brief_id, error=str(e))
            raise BriefPersistenceError(str(e)) from e
        return result.scalar_one_or_none()

    async def update(
        self,
        brief_id: str,
        updates: Union[NarrativeUpdate, Dict[str, Any]],
        owner_id: Optional[str] = None,
    ) -> Brief:
        """Rewrite narrative fields; raw signal collections are never touched."""
        if isinstance(updates, NarrativeUpdate):
            values = updates.model_dump(exclude_none=True)
        else:
            values = dict(updates)

        illegal = set(values) - NARRATIVE_FIELDS
        if illegal:
            raise ValueError(f"Only narrative fields can be updated, got: {', '.join(sorted(illegal))}")

        record = await self.get_by_id(brief_id, owner_id)
        if record is None:
            raise BriefNotFoundError(brief_id)

        for name, value in values.items():
            setattr(record, name, value)
        try:
            await self.db.commit()
            await self.db.refresh(record)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to update brief", brief_id=brief_id, error=str(e))
            raise BriefPersistenceError(str(e)) from e

        logger.info("Brief updated", brief_id=brief_id, fields=sorted(values))
        return record

    async def delete(self, brief_id: str, owner_id: Optional[str] = None) -> None:
        try:
            result = await self.db.execute(self._scoped(delete(Brief), brief_id, owner_id))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to delete brief", brief_id=brief_id, error=str(e))
            raise BriefPersistenceError(str(e)) from e

        if result.rowcount == 0:
            raise BriefNotFoundError(brief_id)
        logger.info("Brief deleted", brief_id=brief_id, user_id=owner_id)
