"""
Participant Schemas
Request bodies and JSON envelopes for the participant endpoints
"""

from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from codescape.models.participant import Participant

DataT = TypeVar("DataT")


class ParticipantCreate(BaseModel):
    """
    Registration request body.

    Fields are intentionally loose; the explicit validation in
    ``codescape.services.validation`` reports every violation at once.
    """
    model_config = ConfigDict(extra="ignore")

    name: Any = Field(None, description="Participant name")
    email: Any = Field(None, description="Contact email")
    teamSize: Any = Field(None, description="Number of team members (1-10)")


class ParticipantStatusUpdate(BaseModel):
    """Status transition request body"""
    status: Any = Field(None, description="registered, confirmed or cancelled")


class ParticipantData(BaseModel):
    """Public participant fields"""
    id: str
    name: str
    email: str
    teamSize: int
    registrationDate: datetime

    @classmethod
    def from_model(cls, participant: Participant) -> "ParticipantData":
        return cls(
            id=participant.id,
            name=participant.name,
            email=participant.email,
            teamSize=participant.team_size,
            registrationDate=participant.registration_date,
        )


class ParticipantStatusData(ParticipantData):
    status: str

    @classmethod
    def from_model(cls, participant: Participant) -> "ParticipantStatusData":
        return cls(
            **ParticipantData.from_model(participant).model_dump(),
            status=participant.status.value,
        )


class StatsData(BaseModel):
    totalParticipants: int = 0
    totalTeamMembers: int = 0
    averageTeamSize: float = 0


class Envelope(BaseModel, Generic[DataT]):
    """Response envelope shared by every endpoint"""
    success: bool
    message: Optional[str] = None
    count: Optional[int] = None
    data: Optional[DataT] = None


class ParticipantListResponse(Envelope[List[ParticipantData]]):
    pass


class ParticipantResponse(Envelope[ParticipantData]):
    pass


class ParticipantStatusResponse(Envelope[ParticipantStatusData]):
    pass


class StatsResponse(Envelope[StatsData]):
    pass


class HealthResponse(BaseModel):
    success: bool = True
    status: str
    message: str
    timestamp: str
