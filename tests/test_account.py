"""Tests for the account wrapper."""

from __future__ import annotations

import pytest

from pteropanel.account import PanelAccount
from pteropanel.api import NotFoundError, PanelResponseError, RemoteError

from conftest import FakeSession, MockResponse

ACCOUNT_PAYLOAD = {
    "object": "user",
    "attributes": {
        "id": 1,
        "admin": False,
        "username": "steve",
        "email": "steve@example.com",
        "first_name": "Steve",
        "last_name": "Miner",
        "language": "en",
    },
}


@pytest.mark.asyncio
async def test_get_account_data(fake_session: FakeSession) -> None:
    fake_session.queue_request(MockResponse(200, ACCOUNT_PAYLOAD))
    account = PanelAccount(fake_session, "ptlc_key")

    data = await account.get_account_data()

    assert data.id == 1
    assert data.username == "steve"
    assert data.language == "en"
    assert fake_session.request_calls[0][1].endswith("/api/client/account")


@pytest.mark.asyncio
async def test_get_account_data_rejects_unexpected_shape(fake_session: FakeSession) -> None:
    fake_session.queue_request(MockResponse(200, {"object": "user", "attributes": {}}))

    with pytest.raises(PanelResponseError):
        await PanelAccount(fake_session, "k").get_account_data()


@pytest.mark.asyncio
async def test_get_account_data_not_found(fake_session: FakeSession) -> None:
    fake_session.queue_request(MockResponse(404, ""))

    with pytest.raises(NotFoundError):
        await PanelAccount(fake_session, "k").get_account_data()


@pytest.mark.asyncio
async def test_generate_two_factor_qr(fake_session: FakeSession) -> None:
    fake_session.queue_request(
        MockResponse(200, {"data": {"image_url_data": "otpauth://totp/panel:steve"}})
    )

    qr = await PanelAccount(fake_session, "k").generate_two_factor_qr()

    assert qr.image_url_data == "otpauth://totp/panel:steve"


@pytest.mark.asyncio
async def test_enable_two_factor_posts_code(fake_session: FakeSession) -> None:
    fake_session.queue_request(
        MockResponse(
            200,
            {"object": "recovery_tokens", "attributes": {"tokens": ["a1", "b2"]}},
        )
    )

    codes = await PanelAccount(fake_session, "k").enable_two_factor("123456")

    assert codes.tokens == ["a1", "b2"]
    method, url, kwargs = fake_session.request_calls[0]
    assert method == "POST"
    assert url.endswith("/api/client/account/two-factor")
    assert kwargs["json"] == {"code": "123456"}


@pytest.mark.asyncio
async def test_enable_two_factor_invalid_code(fake_session: FakeSession) -> None:
    fake_session.queue_request(
        MockResponse(
            400,
            {
                "errors": [
                    {
                        "code": "TwoFactorAuthenticationTokenInvalid",
                        "status": "400",
                        "detail": "The token provided is not valid.",
                    }
                ]
            },
        )
    )

    with pytest.raises(RemoteError, match="The token provided is not valid."):
        await PanelAccount(fake_session, "k").enable_two_factor("000000")


@pytest.mark.asyncio
async def test_disable_two_factor(fake_session: FakeSession) -> None:
    fake_session.queue_request(MockResponse(204))

    assert await PanelAccount(fake_session, "k").disable_two_factor("hunter2") is True
    method, _, kwargs = fake_session.request_calls[0]
    assert method == "DELETE"
    assert kwargs["json"] == {"password": "hunter2"}
