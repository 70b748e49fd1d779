"""
Participant endpoints
Flow: request -> RegistrationService -> ParticipantStore -> JSON envelope
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, status

from codescape.core.database import get_store
from codescape.core.exceptions import CodeScapeException, InternalError
from codescape.core.logging import get_logger
from codescape.schemas.participant import (
    ParticipantCreate,
    ParticipantData,
    ParticipantListResponse,
    ParticipantResponse,
    ParticipantStatusData,
    ParticipantStatusResponse,
    ParticipantStatusUpdate,
)
from codescape.services.participant_store import ParticipantStore
from codescape.services.registration_service import RegistrationService

router = APIRouter()
logger = get_logger(__name__)


def get_registration_service(store: ParticipantStore = Depends(get_store)) -> RegistrationService:
    return RegistrationService(store)


@router.get("", response_model=ParticipantListResponse, response_model_exclude_none=True)
async def list_participants(service: RegistrationService = Depends(get_registration_service)):
    """List registered participants, newest first."""
    try:
        participants = await service.list_participants()
    except Exception as e:
        logger.error("Error fetching participants", error=str(e), exc_info=True)
        raise InternalError("Error fetching participants")

    return ParticipantListResponse(
        success=True,
        count=len(participants),
        data=[ParticipantData.from_model(p) for p in participants],
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ParticipantResponse,
    response_model_exclude_none=True,
)
async def register_participant(
    payload: Optional[ParticipantCreate] = Body(None),
    service: RegistrationService = Depends(get_registration_service),
):
    """Register a new participant."""
    try:
        participant = await service.register((payload or ParticipantCreate()).model_dump())
    except CodeScapeException:
        raise
    except Exception as e:
        logger.error("Registration error", error=str(e), exc_info=True)
        raise InternalError("Registration failed. Please try again.")

    return ParticipantResponse(
        success=True,
        message=participant.confirmation_message(),
        data=ParticipantData.from_model(participant),
    )


@router.patch(
    "/{participant_id}/status",
    response_model=ParticipantStatusResponse,
    response_model_exclude_none=True,
)
async def update_participant_status(
    participant_id: str,
    payload: Optional[ParticipantStatusUpdate] = Body(None),
    service: RegistrationService = Depends(get_registration_service),
):
    """Move a participant to registered, confirmed or cancelled."""
    try:
        participant = await service.change_status(participant_id, payload.status if payload else None)
    except CodeScapeException:
        raise
    except Exception as e:
        logger.error("Status update error", participant_id=participant_id, error=str(e), exc_info=True)
        raise InternalError("Status update failed. Please try again.")

    return ParticipantStatusResponse(
        success=True,
        message=f"Participant status changed to {participant.status.value}",
        data=ParticipantStatusData.from_model(participant),
    )
