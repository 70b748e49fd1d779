"""
Database models package
"""

from codescape.core.database import Base
from .participant import Participant, ParticipantStatus

__all__ = [
    "Base",
    "Participant",
    "ParticipantStatus",
]
