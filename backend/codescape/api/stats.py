"""
Statistics endpoint for the dashboard
"""

from fastapi import APIRouter, Depends

from codescape.api.participants import get_registration_service
from codescape.core.exceptions import InternalError
from codescape.core.logging import get_logger
from codescape.schemas.participant import StatsData, StatsResponse
from codescape.services.registration_service import RegistrationService

router = APIRouter()
logger = get_logger(__name__)


@router.get("", response_model=StatsResponse, response_model_exclude_none=True)
async def participant_stats(service: RegistrationService = Depends(get_registration_service)):
    """Totals and average team size over registered participants."""
    try:
        stats = await service.get_stats()
    except Exception as e:
        logger.error("Error fetching stats", error=str(e), exc_info=True)
        raise InternalError("Error fetching statistics")

    return StatsResponse(success=True, data=StatsData(**stats))
