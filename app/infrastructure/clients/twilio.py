"""Twilio Messages API client.

Thin REST client used by the SMS and WhatsApp senders. Vendor responses are
parsed into OperationResult right here so nothing above this module deals
with raw HTTP.
"""

from typing import Optional, TYPE_CHECKING

import requests
import structlog

from infrastructure.operations import (
    OperationResult,
    classify_http_error,
    classify_http_status,
)

if TYPE_CHECKING:
    from infrastructure.configuration.integrations import TwilioSettings

logger = structlog.get_logger()

PROVIDER = "twilio"


class TwilioClient:
    """Send messages through Twilio's ``Messages.json`` endpoint.

    Args:
        settings: Twilio settings (account SID, auth token, sender numbers)
        timeout_seconds: Connect timeout and per-read socket timeout. requests
            applies it to each socket wait, not to the whole call
        session: Optional requests.Session (tests inject a mock)
    """

    def __init__(
        self,
        settings: "TwilioSettings",
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self._settings = settings
        self._timeout = timeout_seconds
        self._session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    @property
    def messages_url(self) -> str:
        return (
            f"{self._settings.TWILIO_API_URL}/Accounts/"
            f"{self._settings.TWILIO_ACCOUNT_SID}/Messages.json"
        )

    def send_message(self, to: str, body: str, from_: str) -> OperationResult:
        """Create a message.

        Args:
            to: Destination (``+15551234567`` or ``whatsapp:+15551234567``)
            body: Message text
            from_: Sender number in the same addressing scheme as ``to``

        Returns:
            OperationResult with ``{"sid": ..., "status": ...}`` on success
        """
        if not self.is_configured:
            return OperationResult.permanent_error(
                "Twilio credentials are not configured",
                error_code="TRANSPORT_NOT_CONFIGURED",
            )

        try:
            response = self._session.post(
                self.messages_url,
                data={"To": to, "From": from_, "Body": body},
                auth=(
                    self._settings.TWILIO_ACCOUNT_SID,
                    self._settings.TWILIO_AUTH_TOKEN,
                ),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning("twilio_request_failed", error=str(e))
            return classify_http_error(e, provider=PROVIDER)

        if response.status_code in (200, 201):
            payload = _safe_json(response)
            return OperationResult.success(
                data={"sid": payload.get("sid"), "status": payload.get("status")},
                message="Message accepted by Twilio",
            )

        payload = _safe_json(response)
        return classify_http_status(
            response.status_code,
            PROVIDER,
            detail=str(payload.get("message", "")),
            retry_after=response.headers.get("Retry-After"),
        )

    def check_account(self) -> OperationResult:
        """Fetch the account resource to confirm credentials."""
        if not self.is_configured:
            return OperationResult.permanent_error(
                "Twilio credentials are not configured",
                error_code="TRANSPORT_NOT_CONFIGURED",
            )
        url = (
            f"{self._settings.TWILIO_API_URL}/Accounts/"
            f"{self._settings.TWILIO_ACCOUNT_SID}.json"
        )
        try:
            response = self._session.get(
                url,
                auth=(
                    self._settings.TWILIO_ACCOUNT_SID,
                    self._settings.TWILIO_AUTH_TOKEN,
                ),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            return classify_http_error(e, provider=PROVIDER)

        if response.status_code == 200:
            return OperationResult.success(message="Twilio account reachable")
        return classify_http_status(response.status_code, PROVIDER)


def _safe_json(response: requests.Response) -> dict:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}
