"""End-to-end: form controller submitting to the real application."""
import httpx
import pytest

from codescape.client.form_controller import MAIN_FORM_ID, MODAL_FORM_ID, FormController


@pytest.mark.asyncio
async def test_form_registers_through_api(app, store):
    """The page's form posts to the backend and the participant is listed."""
    app.state.store = store
    transport = httpx.ASGITransport(app=app)

    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        controller = FormController(api_client=client, scheduler=lambda delay, callback: None)

        controller.forms[MAIN_FORM_ID].fill(name="Ada", email="ADA@X.COM", team="3")
        assert await controller.submit(MAIN_FORM_ID) is True

        controller.open_registration_overlay()
        controller.forms[MODAL_FORM_ID].fill(name="Ada Again", email="ada@x.com", team="2")
        assert await controller.submit(MODAL_FORM_ID) is False
        assert controller.forms[MODAL_FORM_ID].error == "Email already registered!"

        listing = (await client.get("/api/participants")).json()

    assert listing["count"] == 1
    assert listing["data"][0]["email"] == "ada@x.com"
    assert [entry.name for entry in controller.page.participant_lists["participant-list"]] == ["Ada"]
