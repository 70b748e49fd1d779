"""Unit tests for the participant store."""
import pytest

from codescape.core.exceptions import DuplicateEmailError, NotFoundError, ValidationError
from codescape.models.participant import ParticipantStatus
from codescape.services.participant_store import ParticipantStore


def registration(name="Ada", email="ada@x.com", team_size=3):
    return {"name": name, "email": email, "teamSize": team_size}


class TestParticipantStoreLifecycle:
    """Test open/close of the store handle."""

    @pytest.mark.asyncio
    async def test_open_and_close(self, settings):
        store = ParticipantStore(settings.DATABASE_URL)
        assert not store.is_open

        await store.open()
        assert store.is_open
        await store.ping()

        await store.close()
        assert not store.is_open

    @pytest.mark.asyncio
    async def test_session_requires_open_store(self, settings):
        store = ParticipantStore(settings.DATABASE_URL)

        with pytest.raises(RuntimeError):
            await store.find_all()


class TestCreate:
    """Test ParticipantStore.create."""

    @pytest.mark.asyncio
    async def test_assigns_id_and_defaults(self, store):
        participant = await store.create(registration(name="  Ada  ", email="ADA@X.COM"))

        assert participant.id
        assert participant.name == "Ada"
        assert participant.email == "ada@x.com"
        assert participant.team_size == 3
        assert participant.status == ParticipantStatus.REGISTERED
        assert participant.registration_date is not None

    @pytest.mark.asyncio
    async def test_rejects_invalid_record_with_all_messages(self, store):
        with pytest.raises(ValidationError) as exc_info:
            await store.create({"name": "", "email": "bad", "teamSize": 0})

        assert exc_info.value.messages == [
            "Name is required",
            "Please enter a valid email",
            "Team size must be at least 1",
        ]

    @pytest.mark.asyncio
    async def test_unique_constraint_is_case_insensitive(self, store):
        """The constraint alone rejects a duplicate, without any pre-check."""
        await store.create(registration(email="ada@x.com"))

        with pytest.raises(DuplicateEmailError):
            await store.create(registration(name="Other", email="Ada@X.com"))

        assert len(await store.find_all()) == 1


class TestQueries:
    """Test listing and aggregation."""

    @pytest.mark.asyncio
    async def test_find_by_email_ignores_case(self, store):
        created = await store.create(registration())

        found = await store.find_by_email("  ADA@x.COM ")

        assert found is not None
        assert found.id == created.id
        assert await store.find_by_email("nobody@x.com") is None

    @pytest.mark.asyncio
    async def test_find_all_newest_first_and_registered_only(self, store):
        first = await store.create(registration(name="First", email="first@x.com"))
        second = await store.create(registration(name="Second", email="second@x.com"))
        third = await store.create(registration(name="Third", email="third@x.com"))
        await store.update_status(second.id, "cancelled")

        participants = await store.find_all()

        assert [p.id for p in participants] == [third.id, first.id]

    @pytest.mark.asyncio
    async def test_find_all_by_status(self, store):
        created = await store.create(registration())
        await store.update_status(created.id, ParticipantStatus.CONFIRMED)

        assert await store.find_all() == []
        confirmed = await store.find_all(ParticipantStatus.CONFIRMED)
        assert [p.id for p in confirmed] == [created.id]

    @pytest.mark.asyncio
    async def test_count_and_aggregate(self, store):
        for index, team_size in enumerate([2, 4, 6]):
            await store.create(registration(email=f"p{index}@x.com", team_size=team_size))

        assert await store.count_and_aggregate() == {"count": 3, "sum_team_size": 12}

    @pytest.mark.asyncio
    async def test_count_and_aggregate_empty(self, store):
        assert await store.count_and_aggregate() == {"count": 0, "sum_team_size": 0}


class TestUpdateStatus:
    """Test ParticipantStore.update_status."""

    @pytest.mark.asyncio
    async def test_changes_status(self, store):
        created = await store.create(registration())

        updated = await store.update_status(created.id, "confirmed")

        assert updated.status == ParticipantStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_unknown_id(self, store):
        with pytest.raises(NotFoundError):
            await store.update_status("missing-id", "cancelled")

    @pytest.mark.asyncio
    async def test_unknown_status(self, store):
        created = await store.create(registration())

        with pytest.raises(ValidationError) as exc_info:
            await store.update_status(created.id, "archived")

        assert exc_info.value.messages == ["Status must be one of: registered, confirmed, cancelled"]
