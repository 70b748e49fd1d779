"""
Participant Store - schema-validated participant persistence
Flow: open() -> create / find / aggregate -> close()

The store is an explicitly constructed handle: the application lifespan
opens it on startup, hands it to request handlers through ``get_store``,
and closes it on shutdown.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import structlog
from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from codescape.core.database import Base, build_engine, build_session_factory
from codescape.core.exceptions import DuplicateEmailError, NotFoundError, ValidationError
from codescape.models.participant import Participant, ParticipantStatus
from codescape.services.validation import clean_participant

logger = structlog.get_logger(__name__)


class ParticipantStore:
    """Record store for participants with a unique email constraint."""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    async def open(self) -> None:
        """Create the engine and make sure the participants table exists."""
        if self._engine is not None:
            return

        self._engine = build_engine(self.database_url, echo=self.echo)
        self._session_factory = build_session_factory(self._engine)

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Participant store opened", database=self._engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        """Dispose the engine and its connection pool."""
        if self._engine is None:
            return

        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Participant store closed")

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if self._session_factory is None:
            raise RuntimeError("Participant store is not open")

        async with self._session_factory() as session:
            yield session

    async def ping(self) -> None:
        """Round-trip to the database; raises when it is unreachable."""
        async with self.session() as session:
            await session.execute(text("SELECT 1"))

    async def create(self, record: Dict[str, Any]) -> Participant:
        """
        Validate and insert a participant.

        Raises:
            ValidationError: one or more fields are invalid (all are reported)
            DuplicateEmailError: the unique email constraint rejected the insert
        """
        cleaned = clean_participant(record)
        participant = Participant(
            name=cleaned["name"],
            email=cleaned["email"],
            team_size=cleaned["team_size"],
            status=ParticipantStatus.REGISTERED,
        )

        async with self.session() as session:
            session.add(participant)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                if await self.find_by_email(cleaned["email"]) is not None:
                    raise DuplicateEmailError(cleaned["email"])
                raise
            await session.refresh(participant)

        logger.info("Participant created", participant_id=participant.id, team_size=participant.team_size)
        return participant

    async def find_by_email(self, email: str) -> Optional[Participant]:
        """Case-insensitive lookup by email."""
        async with self.session() as session:
            result = await session.execute(
                select(Participant).where(Participant.email == email.strip().lower())
            )
            return result.scalar_one_or_none()

    async def find_all(
        self,
        status: ParticipantStatus = ParticipantStatus.REGISTERED
    ) -> List[Participant]:
        """Participants with the given status, newest registration first."""
        async with self.session() as session:
            result = await session.execute(
                select(Participant)
                .where(Participant.status == status)
                .order_by(Participant.registration_date.desc())
            )
            return list(result.scalars().all())

    async def count_and_aggregate(
        self,
        status: ParticipantStatus = ParticipantStatus.REGISTERED
    ) -> Dict[str, int]:
        """Number of participants and the sum of their team sizes."""
        async with self.session() as session:
            result = await session.execute(
                select(
                    func.count(Participant.id),
                    func.coalesce(func.sum(Participant.team_size), 0),
                ).where(Participant.status == status)
            )
            count, total = result.one()

        return {"count": int(count), "sum_team_size": int(total)}

    async def update_status(self, participant_id: str, status: Any) -> Participant:
        """Move a participant to another lifecycle status."""
        try:
            new_status = ParticipantStatus(status)
        except (TypeError, ValueError):
            allowed = ", ".join(member.value for member in ParticipantStatus)
            raise ValidationError([f"Status must be one of: {allowed}"])

        async with self.session() as session:
            participant = await session.get(Participant, participant_id)
            if participant is None:
                raise NotFoundError(
                    "Participant not found",
                    resource_type="participant",
                    resource_id=participant_id,
                )

            participant.status = new_status
            await session.commit()
            await session.refresh(participant)

        logger.info("Participant status updated", participant_id=participant_id, status=new_status.value)
        return participant
