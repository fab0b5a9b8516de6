from contextlib import asynccontextmanager
from typing import Generic, TypeVar, Optional, List, Type, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, update, delete
from pydantic import BaseModel

from common.core.exceptions import StoreError
from common.core.otel_axiom_exporter import trace_span, get_logger
from common.db.scoped import get_session

logger = get_logger(__name__)

EntityType = TypeVar("EntityType")
DomainModelType = TypeVar("DomainModelType")
CreateModelType = TypeVar("CreateModelType", bound=BaseModel)
UpdateModelType = TypeVar("UpdateModelType", bound=BaseModel)


class BaseRepository(Generic[EntityType, DomainModelType]):
    """
    Base repository with support for both explicit and lazy session management.

    1. Explicit session: pass db_session to the constructor. The caller owns
       the session lifecycle.
    2. Lazy session: omit db_session. Each operation acquires a session via
       ``get_session()``, which reuses the session of an enclosing
       ``transaction()`` when there is one.

    Driver and constraint failures surface as ``StoreError``.
    """

    def __init__(
        self,
        entity_class: Type[EntityType],
        domain_class: Type[DomainModelType],
        db_session: Optional[AsyncSession] = None,
    ):
        self.entity_class = entity_class
        self.domain_class = domain_class
        self._explicit_session = db_session

    @asynccontextmanager
    async def _get_session(self) -> AsyncGenerator[AsyncSession, None]:
        try:
            if self._explicit_session is not None:
                yield self._explicit_session
            else:
                async with get_session() as session:
                    yield session
        except SQLAlchemyError as e:
            logger.error(
                f"{self.entity_class.__name__} store operation failed: {e}",
                extra={"entity": self.entity_class.__name__},
            )
            raise StoreError(str(e)) from e

    def _entity_to_domain(self, entity: EntityType) -> DomainModelType:
        """Convert database entity to domain model."""
        return self.domain_class.model_validate(entity)

    def _entities_to_domain(self, entities: List[EntityType]) -> List[DomainModelType]:
        return [self._entity_to_domain(entity) for entity in entities]

    @trace_span
    async def get(self, id: str) -> Optional[DomainModelType]:
        query = select(self.entity_class).where(self.entity_class.id == id)
        async with self._get_session() as session:
            result = await session.execute(query)
            entity = result.scalar_one_or_none()
            return self._entity_to_domain(entity) if entity else None

    @trace_span
    async def create(self, create_model: CreateModelType) -> DomainModelType:
        """Create a new entity from a typed create model."""
        data = create_model.model_dump(exclude_none=True)
        db_obj = self.entity_class(**data)
        async with self._get_session() as session:
            session.add(db_obj)
            await session.flush()
            await session.refresh(db_obj)
            return self._entity_to_domain(db_obj)

    @trace_span
    async def update(
        self, id: str, update_model: UpdateModelType
    ) -> Optional[DomainModelType]:
        """Update an entity with a typed update model."""
        data = update_model.model_dump(exclude_unset=True)
        if not data:
            return await self.get(id)

        async with self._get_session() as session:
            await session.execute(
                update(self.entity_class).where(self.entity_class.id == id).values(data)
            )
            await session.flush()
        return await self.get(id)

    @trace_span
    async def delete(self, id: str) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                delete(self.entity_class).where(self.entity_class.id == id)
            )
            await session.flush()
            return result.rowcount > 0
