"""Tests for the upstream registration API client.

Requests are served by httpx.MockTransport.
"""

from __future__ import annotations

import json

import httpx
import pytest

from enrollment.client import RegistrationGateway
from enrollment.errors import GatewayError
from enrollment.models import ProfileData, UserRole
from enrollment.payments import PaymentRequest

BASE_URL = "http://upstream.test/api"


def make_gateway(handler, token: str | None = "tok") -> RegistrationGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RegistrationGateway(BASE_URL, token=token, client=client)


class TestCatalogRequests:
    @pytest.mark.asyncio
    async def test_bearer_token_is_forwarded(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"id": "c1", "name": "Tent", "shiftsRequired": 2}])

        gateway = make_gateway(handler)
        options = await gateway.get_camping_options()

        assert seen[0].url == httpx.URL(f"{BASE_URL}/camping-options")
        assert seen[0].headers["Authorization"] == "Bearer tok"
        assert options[0].work_shifts_required == 2

    @pytest.mark.asyncio
    async def test_jobs_filtered_by_category(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"id": "j1", "name": "Dishes", "categoryId": "k", "shiftId": "s1"}])

        gateway = make_gateway(handler)
        jobs = await gateway.get_jobs(["k", "b"])

        assert seen[0].url.params["categoryIds"] == "b,k"
        assert jobs[0].category_id == "k"

    @pytest.mark.asyncio
    async def test_fields_default_owner_to_requested_option(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/camping-options/c9/fields"
            return httpx.Response(200, json=[{"id": "f1", "displayName": "Guests", "dataType": "INTEGER"}])

        fields = await make_gateway(handler).get_camping_option_fields("c9")

        assert fields[0].camping_option_id == "c9"
        assert fields[0].display_name == "Guests"


class TestUserAndSite:
    @pytest.mark.asyncio
    async def test_current_user_and_profile(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    "id": "u1",
                    "email": "a@b.c",
                    "role": "staff",
                    "firstName": "Robin",
                    "playaName": None,
                    "allowDeferredDuesPayment": True,
                },
            )

        user, profile = await make_gateway(handler).get_current_user()

        assert user.role == UserRole.STAFF
        assert user.allow_deferred_dues_payment
        assert profile.first_name == "Robin"
        assert profile.playa_name == ""

    @pytest.mark.asyncio
    async def test_site_config(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/public/config"
            return httpx.Response(
                200,
                json={
                    "campName": "Dust",
                    "registrationYear": 2026,
                    "registrationOpen": True,
                    "earlyRegistrationOpen": False,
                    "allowDeferredDuesPayment": True,
                },
            )

        site = await make_gateway(handler).get_site_config()

        assert site.camp_name == "Dust"
        assert site.registration_open
        assert site.allow_deferred_dues_payment
        assert not site.stripe_enabled

    @pytest.mark.asyncio
    async def test_update_profile_puts_camel_case(self):
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "PUT"
            assert request.url.path == "/api/users/u1"
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"id": "u1"})

        await make_gateway(handler).update_profile("u1", ProfileData(first_name="Robin"))

        assert bodies[0]["firstName"] == "Robin"


class TestSubmissionAndPayment:
    @pytest.mark.asyncio
    async def test_submit_returns_registration_id(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert json.loads(request.content)["acceptedTerms"] is True
            return httpx.Response(201, json={"id": "reg-9"})

        registration_id = await make_gateway(handler).submit_registration({"acceptedTerms": True})

        assert registration_id == "reg-9"

    @pytest.mark.asyncio
    async def test_initiate_payment(self):
        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            assert request.url.path == "/api/payments/stripe"
            assert body["amount"] == 30000
            assert body["registrationId"] == "reg-1"
            assert "successUrl" not in body
            return httpx.Response(200, json={"url": "https://pay.example/s", "sessionId": "cs_1"})

        request = PaymentRequest(
            amount_cents=30000, currency="USD", user_id="u1", registration_id="reg-1", description="Dues"
        )
        checkout = await make_gateway(handler).initiate_payment(request)

        assert checkout.url == "https://pay.example/s"
        assert checkout.session_id == "cs_1"


class TestErrors:
    """Every upstream failure surfaces as GatewayError."""

    @pytest.mark.asyncio
    async def test_http_error_carries_status_and_message(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(409, json={"message": "Job is full"})

        with pytest.raises(GatewayError, match="Job is full") as exc_info:
            await make_gateway(handler).submit_registration({})

        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_validation_message_lists_are_joined(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"message": ["a is bad", "b is bad"]})

        with pytest.raises(GatewayError, match="a is bad; b is bad"):
            await make_gateway(handler).get_shifts()

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(GatewayError) as exc_info:
            await make_gateway(handler).get_job_categories()

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_missing_registration_id(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(201, json={})

        with pytest.raises(GatewayError, match="did not include an id"):
            await make_gateway(handler).submit_registration({})

    @pytest.mark.asyncio
    async def test_malformed_record_is_a_gateway_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"name": "Dishes", "maxRegistrations": -1}])

        with pytest.raises(GatewayError, match="Malformed job record"):
            await make_gateway(handler).get_jobs()

    @pytest.mark.asyncio
    async def test_non_list_catalog_payload_is_a_gateway_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"shifts": []})

        with pytest.raises(GatewayError, match="Expected a list of shift records"):
            await make_gateway(handler).get_shifts()

    @pytest.mark.asyncio
    async def test_malformed_profile_is_a_gateway_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"user": {"email": "x@example.org"}})

        with pytest.raises(GatewayError, match="Malformed user record"):
            await make_gateway(handler).get_current_user()
