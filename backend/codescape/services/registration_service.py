"""
Registration Service - participant registration, listing and statistics
Flow: API handler -> RegistrationService -> ParticipantStore
"""

import math
from typing import Any, Dict, List

import structlog

from codescape.core.exceptions import DuplicateEmailError
from codescape.models.participant import Participant, ParticipantStatus
from codescape.services.participant_store import ParticipantStore
from codescape.services.validation import clean_participant

logger = structlog.get_logger(__name__)


def round_half_up(value: float, digits: int = 1) -> float:
    """Round like the page does (halves go up, not to even)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


class RegistrationService:
    """Business logic behind the /api/participants and /api/stats endpoints."""

    def __init__(self, store: ParticipantStore):
        self.store = store

    async def register(self, payload: Dict[str, Any]) -> Participant:
        """
        Register a participant.

        The email pre-check only produces the friendly error early; the
        store's unique constraint still decides when two requests race.
        """
        cleaned = clean_participant(payload)

        existing = await self.store.find_by_email(cleaned["email"])
        if existing is not None:
            raise DuplicateEmailError(cleaned["email"])

        participant = await self.store.create(
            {"name": cleaned["name"], "email": cleaned["email"], "teamSize": cleaned["team_size"]}
        )
        logger.info("Participant registered", participant_id=participant.id)
        return participant

    async def list_participants(self) -> List[Participant]:
        return await self.store.find_all(ParticipantStatus.REGISTERED)

    async def get_stats(self) -> Dict[str, Any]:
        aggregate = await self.store.count_and_aggregate(ParticipantStatus.REGISTERED)
        total_participants = aggregate["count"]
        total_team_members = aggregate["sum_team_size"]

        average = total_team_members / total_participants if total_participants > 0 else 0

        return {
            "totalParticipants": total_participants,
            "totalTeamMembers": total_team_members,
            "averageTeamSize": round_half_up(average, 1),
        }

    async def change_status(self, participant_id: str, status: Any) -> Participant:
        return await self.store.update_status(participant_id, status)
