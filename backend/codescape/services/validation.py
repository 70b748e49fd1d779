"""
Participant validation rules
Flow: raw payload -> per-field checks -> (cleaned record, violations)

Kept independent of the persistence layer so the store, the HTTP handlers
and the form controller all apply the same rules.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from codescape.core.exceptions import ValidationError
from codescape.models.participant import NAME_MAX_LENGTH, TEAM_SIZE_MAX, TEAM_SIZE_MIN

EMAIL_PATTERN = re.compile(r"\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,3}", re.ASCII)
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]{1,9}")


def parse_team_size(value: Any) -> Optional[int]:
    """
    Parse a team size coming from JSON or a form field.

    Returns None when the value is not a whole number.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and _INTEGER_PATTERN.fullmatch(value.strip()):
        return int(value.strip())
    return None


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(email))


def validate_participant(data: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a participant registration.

    Args:
        data: Mapping with ``name``, ``email`` and ``teamSize`` (or ``team_size``)

    Returns:
        Tuple of the normalized record (``name``, ``email``, ``team_size``)
        and the list of every violated field message, in field order.
    """
    errors: List[str] = []
    cleaned: Dict[str, Any] = {}

    name = data.get("name")
    name = name.strip() if isinstance(name, str) else ""
    if not name:
        errors.append("Name is required")
    elif len(name) > NAME_MAX_LENGTH:
        errors.append(f"Name cannot exceed {NAME_MAX_LENGTH} characters")
    cleaned["name"] = name

    email = data.get("email")
    email = email.strip().lower() if isinstance(email, str) else ""
    if not email:
        errors.append("Email is required")
    elif not is_valid_email(email):
        errors.append("Please enter a valid email")
    cleaned["email"] = email

    raw_team_size = data.get("teamSize", data.get("team_size"))
    team_size = parse_team_size(raw_team_size)
    if raw_team_size is None or (isinstance(raw_team_size, str) and not raw_team_size.strip()):
        errors.append("Team size is required")
    elif team_size is None:
        errors.append("Team size must be a whole number")
    elif team_size < TEAM_SIZE_MIN:
        errors.append(f"Team size must be at least {TEAM_SIZE_MIN}")
    elif team_size > TEAM_SIZE_MAX:
        errors.append(f"Team size cannot exceed {TEAM_SIZE_MAX}")
    cleaned["team_size"] = team_size

    return cleaned, errors


def clean_participant(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a registration, raising ValidationError with all violations."""
    cleaned, errors = validate_participant(data)
    if errors:
        raise ValidationError(errors)
    return cleaned
