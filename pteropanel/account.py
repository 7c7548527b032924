"""Account endpoints of the panel client API."""

from __future__ import annotations

import logging

from .api import PanelRESTClient
from .codecs.panel_codec import decode_attributes, decode_data
from .codecs.panel_models import AccountData, TwoFactorCodes, TwoFactorData
from .const import ACCOUNT_PATH, TWO_FACTOR_PATH

_LOGGER = logging.getLogger(__name__)


class PanelAccount(PanelRESTClient):
    """Read account details and manage two-factor authentication."""

    async def get_account_data(self) -> AccountData:
        """Return the profile of the API key's owner."""
        data = await self._request("GET", ACCOUNT_PATH)
        return decode_attributes(AccountData, data, what="account")

    async def generate_two_factor_qr(self) -> TwoFactorData:
        """Return the TOTP enrolment QR payload."""
        data = await self._request("GET", TWO_FACTOR_PATH)
        return decode_data(TwoFactorData, data, what="two-factor QR")

    async def enable_two_factor(self, code: str) -> TwoFactorCodes:
        """Confirm enrolment with a TOTP ``code`` and return recovery tokens."""
        data = await self._request("POST", TWO_FACTOR_PATH, payload={"code": code})
        _LOGGER.debug("Two-factor authentication enabled")
        return decode_attributes(TwoFactorCodes, data, what="two-factor codes")

    async def disable_two_factor(self, password: str) -> bool:
        """Disable two-factor authentication using the account ``password``."""
        await self._request("DELETE", TWO_FACTOR_PATH, payload={"password": password})
        _LOGGER.debug("Two-factor authentication disabled")
        return True
