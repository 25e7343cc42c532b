"""Resend email API client."""

from typing import Optional, TYPE_CHECKING

import requests
import structlog

from infrastructure.operations import (
    OperationResult,
    classify_http_error,
    classify_http_status,
)

if TYPE_CHECKING:
    from infrastructure.configuration.integrations import ResendSettings

logger = structlog.get_logger()

PROVIDER = "resend"


class ResendClient:
    """Send transactional email through the Resend ``/emails`` endpoint.

    Args:
        settings: Resend settings (API key, base URL, from address)
        timeout_seconds: Connect timeout and per-read socket timeout. requests
            applies it to each socket wait, not to the whole call
        session: Optional requests.Session (tests inject a mock)
    """

    def __init__(
        self,
        settings: "ResendSettings",
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self._settings = settings
        self._timeout = timeout_seconds
        self._session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self._settings.RESEND_API_KEY}",
            "Content-Type": "application/json",
        }

    def send_email(self, to: str, subject: str, html: str) -> OperationResult:
        """Send one email.

        Returns:
            OperationResult with ``{"id": ...}`` on success
        """
        if not self.is_configured:
            return OperationResult.permanent_error(
                "Resend API key is not configured",
                error_code="TRANSPORT_NOT_CONFIGURED",
            )

        payload = {
            "from": self._settings.RESEND_FROM_ADDRESS,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        try:
            response = self._session.post(
                f"{self._settings.RESEND_API_URL}/emails",
                json=payload,
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning("resend_request_failed", error=str(e))
            return classify_http_error(e, provider=PROVIDER)

        if response.status_code in (200, 201):
            body = _safe_json(response)
            return OperationResult.success(
                data={"id": body.get("id")}, message="Email accepted by Resend"
            )

        body = _safe_json(response)
        return classify_http_status(
            response.status_code,
            PROVIDER,
            detail=str(body.get("message", "")),
            retry_after=response.headers.get("Retry-After"),
        )

    def check_domains(self) -> OperationResult:
        """List sending domains to confirm the API key works."""
        if not self.is_configured:
            return OperationResult.permanent_error(
                "Resend API key is not configured",
                error_code="TRANSPORT_NOT_CONFIGURED",
            )
        try:
            response = self._session.get(
                f"{self._settings.RESEND_API_URL}/domains",
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            return classify_http_error(e, provider=PROVIDER)

        if response.status_code == 200:
            return OperationResult.success(message="Resend API reachable")
        return classify_http_status(response.status_code, PROVIDER)


def _safe_json(response: requests.Response) -> dict:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}
