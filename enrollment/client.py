"""Async client for the upstream registration API.

Wraps an ``httpx.AsyncClient``. Every transport failure or non-2xx response is
raised as GatewayError so callers only handle one exception type.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from types import TracebackType
from typing import Any, TypeVar, cast

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from .config.loader import SiteConfigLoader
from .config.settings import Settings
from .errors import GatewayError
from .logging_config import TRACE
from .models import CampingOption, CustomField, Job, JobCategory, ProfileData, Shift, SiteConfig, UserAccount
from .payments import CheckoutSession, PaymentRequest

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class RegistrationGateway:
    """Client for the registration API used by a single user's session."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._base_url = base_url.rstrip("/")
        self._headers = headers

    @classmethod
    def from_settings(cls, settings: Settings, token: str | None = None) -> RegistrationGateway:
        return cls(settings.gateway_base_url, token=token, timeout=settings.gateway_timeout_seconds)

    async def __aenter__(self) -> RegistrationGateway:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        url = f"{self._base_url}/{path.lstrip('/')}"
        logger.log(TRACE, f"{method} {url} params={params}")
        try:
            response = await self._client.request(method, url, params=params, json=json, headers=self._headers)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out")
            raise GatewayError(f"Request to {path} timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {type(e).__name__}: {e}")
            raise GatewayError(f"Request to {path} failed: {e}") from e

        if response.is_error:
            message = _error_message(response)
            logger.warning(f"{method} {path} returned {response.status_code}: {message}")
            raise GatewayError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise GatewayError(f"Invalid JSON from {path}", status_code=response.status_code) from e

    # Catalog

    async def get_camping_options(self) -> list[CampingOption]:
        data = await self._request("GET", "camping-options")
        return _parse_list(CampingOption, data, "camping option")

    async def get_job_categories(self) -> list[JobCategory]:
        data = await self._request("GET", "job-categories")
        return _parse_list(JobCategory, data, "job category")

    async def get_jobs(self, category_ids: Iterable[str] | None = None) -> list[Job]:
        params = None
        if category_ids is not None:
            ids = sorted(category_ids)
            if ids:
                params = {"categoryIds": ",".join(ids)}
        data = await self._request("GET", "jobs", params=params)
        return _parse_list(Job, data, "job")

    async def get_shifts(self) -> list[Shift]:
        data = await self._request("GET", "shifts")
        return _parse_list(Shift, data, "shift")

    async def get_camping_option_fields(self, camping_option_id: str) -> list[CustomField]:
        data = await self._request("GET", f"camping-options/{camping_option_id}/fields")
        # Some responses omit the owner on nested field records
        records = [
            {"campingOptionId": camping_option_id, **item} if isinstance(item, dict) else item
            for item in _records(data, "custom field")
        ]
        return _parse_list(CustomField, records, "custom field")

    # Site and user

    async def get_public_config(self) -> dict[str, Any]:
        data = await self._request("GET", "public/config")
        return cast(dict[str, Any], data or {})

    async def get_site_config(self) -> SiteConfig:
        return (await SiteConfigLoader.fetch(self)).to_site_config()

    async def get_current_user(self) -> tuple[UserAccount, ProfileData]:
        data = await self._request("GET", "auth/profile")
        if not isinstance(data, dict):
            raise GatewayError("Profile response was empty")
        record = data.get("user", data)
        return _parse(UserAccount, record, "user"), _parse(ProfileData, record, "profile")

    async def update_profile(self, user_id: str, profile: ProfileData) -> None:
        await self._request("PUT", f"users/{user_id}", json=profile.model_dump(by_alias=True))

    # Registration and payment

    async def submit_registration(self, payload: dict[str, Any]) -> str:
        """Create the registration and return its id."""
        data = await self._request("POST", "registrations", json=payload)
        if not isinstance(data, dict) or not data.get("id"):
            raise GatewayError("Registration response did not include an id")
        return str(data["id"])

    async def initiate_payment(self, request: PaymentRequest) -> CheckoutSession:
        data = await self._request("POST", "payments/stripe", json=request.to_wire())
        return CheckoutSession.from_wire(data if isinstance(data, dict) else {})


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if isinstance(message, list):
            return "; ".join(str(m) for m in message)
        if message:
            return str(message)
    return response.reason_phrase


def _records(data: Any, what: str) -> list[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise GatewayError(f"Expected a list of {what} records, got {type(data).__name__}")
    return data


def _parse(model: type[M], record: Any, what: str) -> M:
    """Validate one upstream record, reporting malformed data as a GatewayError."""
    try:
        return model.model_validate(record)
    except ModelValidationError as e:
        logger.warning(f"Malformed {what} record from upstream: {e}")
        raise GatewayError(f"Malformed {what} record from upstream ({e.error_count()} invalid fields)") from e


def _parse_list(model: type[M], data: Any, what: str) -> list[M]:
    return [_parse(model, record, what) for record in _records(data, what)]
