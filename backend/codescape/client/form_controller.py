"""
Registration page form controller
Flow: form submit -> field validation -> (optional POST /api/participants) -> page update

Models the sign-up page: the main form, the modal form inside the
registration overlay, the participant lists and the success overlay.
Without an API client the controller only updates the page state; with
one it registers through the backend first and only updates the page
when the backend accepts the registration.
"""

import asyncio
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

import httpx

from codescape.core.logging import get_logger
from codescape.models.participant import TEAM_SIZE_MAX, TEAM_SIZE_MIN
from codescape.services.validation import parse_team_size

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

MAIN_FORM_ID = "rsvp-form"
MODAL_FORM_ID = "rsvp-modal-form"
PARTICIPANT_LIST_IDS = ("participant-list", "modal-participant-list")
SUCCESS_OVERLAY_DELAY = 5.0
REGISTRATION_FAILED_MESSAGE = "Registration failed. Please try again."

FORM_FIELDS = ("name", "email", "team")

Scheduler = Callable[[float, Callable[[], None]], Any]


@dataclass
class ParticipantEntry:
    """One line of a participant list."""
    name: str
    team_size: int
    email: str

    @property
    def label(self) -> str:
        return f"{self.name} ({self.team_size} members)"


@dataclass
class RegistrationForm:
    form_id: str
    values: Dict[str, str] = field(default_factory=lambda: dict.fromkeys(FORM_FIELDS, ""))
    invalid_fields: Set[str] = field(default_factory=set)
    error: Optional[str] = None

    def fill(self, **values: Any) -> None:
        for name, value in values.items():
            if name not in FORM_FIELDS:
                raise KeyError(f"Unknown form field: {name}")
            self.values[name] = "" if value is None else str(value)

    def reset(self) -> None:
        self.values = dict.fromkeys(FORM_FIELDS, "")
        self.invalid_fields.clear()
        self.error = None


@dataclass
class Overlay:
    visible: bool = False
    message: str = ""


@dataclass
class PageState:
    """Everything on the page the controller touches."""
    participant_lists: Dict[str, List[ParticipantEntry]] = field(
        default_factory=lambda: {list_id: [] for list_id in PARTICIPANT_LIST_IDS}
    )
    registration_overlay: Overlay = field(default_factory=Overlay)
    success_overlay: Overlay = field(default_factory=Overlay)
    scroll_locked: bool = False


def validate_form(values: Dict[str, str]) -> Tuple[Set[str], Optional[int]]:
    """
    Apply the form rules.

    Returns:
        The set of invalid field names and the parsed team size (None when
        it does not parse).
    """
    invalid: Set[str] = set()

    if not values.get("name", "").strip():
        invalid.add("name")

    if not EMAIL_PATTERN.fullmatch(values.get("email", "")):
        invalid.add("email")

    team_size = parse_team_size(values.get("team", ""))
    if team_size is None or not TEAM_SIZE_MIN <= team_size <= TEAM_SIZE_MAX:
        invalid.add("team")

    return invalid, team_size


class FormController:
    """Wires both sign-up forms to the page state."""

    def __init__(
        self,
        page: Optional[PageState] = None,
        api_client: Optional[httpx.AsyncClient] = None,
        scheduler: Optional[Scheduler] = None,
        dismiss_delay: float = SUCCESS_OVERLAY_DELAY,
    ):
        self.page = page or PageState()
        self.api_client = api_client
        self.scheduler = scheduler
        self.dismiss_delay = dismiss_delay
        self.forms = {
            MAIN_FORM_ID: RegistrationForm(MAIN_FORM_ID),
            MODAL_FORM_ID: RegistrationForm(MODAL_FORM_ID),
        }

    def open_registration_overlay(self) -> None:
        self.page.registration_overlay.visible = True
        self.page.scroll_locked = True

    def close_registration_overlay(self) -> None:
        self.page.registration_overlay.visible = False
        self.page.scroll_locked = False
        self.forms[MODAL_FORM_ID].reset()

    def handle_window_click(self, target: str) -> None:
        """A click on the overlay backdrop itself closes it."""
        if target == "registration-overlay" and self.page.registration_overlay.visible:
            self.close_registration_overlay()

    async def submit(self, form_id: str) -> bool:
        """
        Handle a submit of one of the forms.

        Returns True when the registration was accepted and the page updated.
        """
        form = self.forms[form_id]
        form.invalid_fields.clear()
        form.error = None

        invalid, team_size = validate_form(form.values)
        if invalid:
            form.invalid_fields.update(invalid)
            return False

        entry = ParticipantEntry(
            name=form.values["name"],
            team_size=team_size,
            email=form.values["email"],
        )
        message = f"Thank you, {entry.name}! Your team of {entry.team_size} is registered."

        if self.api_client is not None:
            accepted = await self._register_remote(form, entry)
            if accepted is None:
                return False
            entry, message = accepted[0], accepted[1] or message

        for participants in self.page.participant_lists.values():
            participants.append(ParticipantEntry(entry.name, entry.team_size, entry.email))

        self.page.success_overlay.visible = True
        self.page.success_overlay.message = message
        self.page.scroll_locked = True

        if form_id == MODAL_FORM_ID:
            self.page.registration_overlay.visible = False

        self._schedule(lambda: self._dismiss_success(form))
        return True

    async def _register_remote(
        self, form: RegistrationForm, entry: ParticipantEntry
    ) -> Optional[Tuple[ParticipantEntry, str]]:
        try:
            response = await self.api_client.post(
                "/api/participants",
                json={"name": entry.name, "email": entry.email, "teamSize": entry.team_size},
            )
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Registration request failed", form_id=form.form_id, error=str(e))
            form.error = REGISTRATION_FAILED_MESSAGE
            return None

        if not isinstance(body, dict):
            body = {}
        if not response.is_success or not body.get("success"):
            form.error = body.get("message") or REGISTRATION_FAILED_MESSAGE
            return None

        data = body.get("data") or {}
        stored = ParticipantEntry(
            name=data.get("name", entry.name),
            team_size=data.get("teamSize", entry.team_size),
            email=data.get("email", entry.email),
        )
        return stored, body.get("message") or ""

    def _schedule(self, callback: Callable[[], None]) -> None:
        if self.scheduler is not None:
            self.scheduler(self.dismiss_delay, callback)
        else:
            asyncio.get_running_loop().call_later(self.dismiss_delay, callback)

    def _dismiss_success(self, form: RegistrationForm) -> None:
        self.page.success_overlay.visible = False
        self.page.scroll_locked = False
        form.reset()
