from __future__ import annotations

import logging
from typing import Any

import httpx

from eventpulse.config import get_settings
from eventpulse.services.exceptions import NetworkOrServerError, PaymentProofRequiredError
from eventpulse.services.schemas import FieldDefinition, RegistrationSubmission, TeamConfiguration
from eventpulse.services.submission_normalizer import Applicant, build_submission

logger = logging.getLogger(__name__)

FALLBACK_MESSAGES = {
    400: "Invalid registration data. Please check your information.",
    404: "Event not found. Please check the event link.",
    500: "Server error. Please try again later.",
}
NETWORK_MESSAGE = "Network error. Please check your internet connection and try again."
GENERIC_MESSAGE = "Registration failed. Please try again later."


def error_from_response(response: httpx.Response) -> NetworkOrServerError:
    server_message = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        server_message = body.get("error") or body.get("message")

    code = response.status_code
    if code == 400:
        message = server_message or FALLBACK_MESSAGES[400]
    elif code in FALLBACK_MESSAGES:
        message = FALLBACK_MESSAGES[code]
    else:
        message = server_message or GENERIC_MESSAGE
    return NetworkOrServerError(message, status_code=code)


class EventPulseClient:
    """Participant-side flow: load the event, validate and normalise the form, submit it."""

    def __init__(
        self,
        base_url: str | None = None,
        user_id: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        headers = {"X-User-Id": str(user_id)} if user_id else {}
        self.user_id = user_id
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=settings.api_timeout,
            headers=headers,
            transport=transport,
        )

    async def __aenter__(self) -> EventPulseClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("Request failed %s %s: %s", method, url, exc)
            raise NetworkOrServerError(NETWORK_MESSAGE) from exc
        if response.is_error:
            raise error_from_response(response)
        return response.json()

    async def fetch_event(self, event_id: int) -> dict[str, Any]:
        return await self._request("GET", f"/events/{event_id}")

    async def submit(self, event_id: int, submission: RegistrationSubmission, paid: bool) -> dict[str, Any]:
        payload = {
            "eventId": event_id,
            "userId": self.user_id,
            "teamName": submission.team_name,
            "responses": submission.responses,
            "participants": submission.participants,
        }
        if not paid:
            return await self._request("POST", "/registration", json=payload)
        if not submission.payment_proof:
            raise PaymentProofRequiredError()
        payload["paymentProof"] = submission.payment_proof
        payload["status"] = "pending"
        return await self._request("POST", "/waiting-list", json=payload)

    async def register(
        self,
        event_id: int,
        form_data: dict[str, str | None],
        selected_size: int | None = None,
        manual_participants: list[dict[str, str]] | None = None,
        applicant: Applicant | None = None,
        payment_proof: str | None = None,
    ) -> dict[str, Any]:
        event = await self.fetch_event(event_id)
        fields = [FieldDefinition.from_dict(f) for f in event.get("customFields") or []]
        team = TeamConfiguration(
            team_size=event.get("teamSize"),
            flexible_team_size=bool(event.get("flexibleTeamSize")),
            team_size_min=event.get("teamSizeMin"),
            team_size_max=event.get("teamSizeMax"),
        )
        paid = bool(event.get("paymentEnabled"))
        if paid and not payment_proof:
            raise PaymentProofRequiredError()

        # Validation failures raise here, before anything is sent.
        submission = build_submission(
            fields,
            team,
            form_data,
            selected_size=selected_size,
            manual_participants=manual_participants,
            applicant=applicant,
            payment_proof=payment_proof,
        )
        return await self.submit(event_id, submission, paid)
