"""
Registration Router - registration session endpoints.

A session is created per user and walked through its steps. Mutations return
the updated session snapshot; forward transitions also return the validation
result for the step being left.

Sessions belong to the bearer token that created them. A session that reaches
COMPLETE is released from the registry after its final snapshot is returned.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from enrollment.session import RegistrationSession

from ..dependencies import (
    GatewayFactory,
    SessionRegistry,
    bearer_token,
    get_gateway_factory,
    get_registry,
    get_session,
    release_if_complete,
)
from ..schemas import (
    AdvanceRequest,
    CustomFieldUpdate,
    PaymentConfirmation,
    ProfileUpdate,
    SessionResponse,
    StepResponse,
    TermsUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/registration", tags=["registration"])


@router.post("/sessions", status_code=201)
async def create_session(
    token: str | None = Depends(bearer_token),
    gateway_factory: GatewayFactory = Depends(get_gateway_factory),
    sessions: SessionRegistry = Depends(get_registry),
) -> SessionResponse:
    """Start a registration session for the calling user."""
    gateway = gateway_factory(token)
    try:
        session = await RegistrationSession.start(gateway)
    except Exception as e:
        logger.warning(f"Could not start registration session: {type(e).__name__}: {e}")
        await gateway.aclose()
        raise
    sessions.add(session, token)
    return SessionResponse.from_session(session)


@router.get("/sessions/{session_id}")
async def read_session(session: RegistrationSession = Depends(get_session)) -> SessionResponse:
    return SessionResponse.from_session(session)


@router.post("/sessions/{session_id}/camping-options/{option_id}")
async def toggle_camping_option(
    option_id: str, session: RegistrationSession = Depends(get_session)
) -> SessionResponse:
    session.toggle_camping_option(option_id)
    return SessionResponse.from_session(session)


@router.post("/sessions/{session_id}/jobs/{job_id}")
async def toggle_job(job_id: str, session: RegistrationSession = Depends(get_session)) -> SessionResponse:
    session.toggle_job(job_id)
    return SessionResponse.from_session(session)


@router.put("/sessions/{session_id}/custom-fields/{field_id}")
async def set_custom_field(
    field_id: str, body: CustomFieldUpdate, session: RegistrationSession = Depends(get_session)
) -> SessionResponse:
    session.set_custom_field(field_id, body.value)
    return SessionResponse.from_session(session)


@router.put("/sessions/{session_id}/profile")
async def update_profile(body: ProfileUpdate, session: RegistrationSession = Depends(get_session)) -> SessionResponse:
    session.update_profile(body.model_dump(exclude_none=True))
    return SessionResponse.from_session(session)


@router.put("/sessions/{session_id}/terms")
async def set_terms(body: TermsUpdate, session: RegistrationSession = Depends(get_session)) -> SessionResponse:
    session.accept_terms(body.accepted)
    return SessionResponse.from_session(session)


@router.post("/sessions/{session_id}/advance")
async def advance(
    body: AdvanceRequest | None = None,
    session: RegistrationSession = Depends(get_session),
    sessions: SessionRegistry = Depends(get_registry),
) -> StepResponse:
    """Validate the current step and move forward when it passes."""
    pay_later = body.pay_later if body else False
    result = await session.advance(pay_later=pay_later)
    response = StepResponse(
        valid=result.valid, errors=dict(result.errors), session=SessionResponse.from_session(session)
    )
    await release_if_complete(session, sessions)
    return response


@router.post("/sessions/{session_id}/back")
async def back(session: RegistrationSession = Depends(get_session)) -> SessionResponse:
    session.back()
    return SessionResponse.from_session(session)


@router.post("/sessions/{session_id}/payment")
async def start_payment(session: RegistrationSession = Depends(get_session)) -> StepResponse:
    """Initiate card payment. Failures are reported under the payment error key."""
    checkout = await session.start_payment()
    snapshot = SessionResponse.from_session(session)
    if checkout is None:
        return StepResponse(valid=False, errors=snapshot.errors, session=snapshot)
    return StepResponse(valid=True, errors={}, session=snapshot)


@router.post("/sessions/{session_id}/payment/confirm")
async def confirm_payment(
    body: PaymentConfirmation,
    session: RegistrationSession = Depends(get_session),
    sessions: SessionRegistry = Depends(get_registry),
) -> SessionResponse:
    session.confirm_payment(body.reference)
    await release_if_complete(session, sessions)
    return SessionResponse.from_session(session)


@router.post("/sessions/{session_id}/payment/defer")
async def defer_payment(
    session: RegistrationSession = Depends(get_session),
    sessions: SessionRegistry = Depends(get_registry),
) -> SessionResponse:
    session.defer_payment()
    await release_if_complete(session, sessions)
    return SessionResponse.from_session(session)
