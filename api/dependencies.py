"""
Shared dependencies for the registration API.

This module provides:
- The in-process registry of open registration sessions
- The gateway factory used to reach the upstream registration API
- Bearer token extraction and per-caller session lookup
"""

from __future__ import annotations

import hmac
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException

from enrollment.client import RegistrationGateway
from enrollment.config.settings import Settings, get_settings
from enrollment.session import RegistrationSession

logger = logging.getLogger(__name__)

GatewayFactory = Callable[[str | None], RegistrationGateway]


@dataclass
class _Entry:
    session: RegistrationSession
    token: str | None
    last_seen: float


def _same_token(expected: str | None, presented: str | None) -> bool:
    if expected is None or presented is None:
        return expected is presented
    return hmac.compare_digest(expected.encode(), presented.encode())


class SessionRegistry:
    """
    Open registration sessions keyed by id.

    Each session belongs to the bearer token that created it and is only
    returned to callers presenting that token. Sessions unused for longer than
    ``idle_timeout`` seconds are closed by ``prune_idle``.
    """

    def __init__(self, idle_timeout: float = 3600.0, clock: Callable[[], float] = time.monotonic) -> None:
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def add(self, session: RegistrationSession, token: str | None) -> None:
        self._entries[session.id] = _Entry(session, token, self._clock())

    def get(self, session_id: str, token: str | None) -> RegistrationSession | None:
        """Return the session if it exists and belongs to ``token``."""
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        if not _same_token(entry.token, token):
            logger.warning(f"Rejected access to registration session {session_id} with a different token")
            return None
        entry.last_seen = self._clock()
        return entry.session

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._entries

    async def discard(self, session_id: str) -> None:
        """Forget a session and close its gateway."""
        entry = self._entries.pop(session_id, None)
        if entry is not None:
            await entry.session.gateway.aclose()
            logger.debug(f"Released registration session {session_id}")

    async def prune_idle(self) -> int:
        """Close sessions idle past the timeout. Returns how many were closed."""
        cutoff = self._clock() - self.idle_timeout
        expired = [session_id for session_id, entry in self._entries.items() if entry.last_seen < cutoff]
        for session_id in expired:
            await self.discard(session_id)
        if expired:
            logger.info(f"Closed {len(expired)} idle registration sessions")
        return len(expired)

    async def close_all(self) -> None:
        """Close every session's gateway and forget the sessions."""
        entries = list(self._entries.values())
        self._entries.clear()
        for entry in entries:
            await entry.session.gateway.aclose()
        if entries:
            logger.info(f"Closed {len(entries)} registration sessions")


registry = SessionRegistry(idle_timeout=get_settings().session_idle_timeout_seconds)


def get_registry() -> SessionRegistry:
    return registry


def get_gateway_factory(settings: Settings = Depends(get_settings)) -> GatewayFactory:
    """FastAPI dependency returning a factory for per-user gateways."""

    def factory(token: str | None) -> RegistrationGateway:
        return RegistrationGateway.from_settings(settings, token=token)

    return factory


def bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    """Extract the bearer token to forward upstream."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Authorization header must be a bearer token")
    return token.strip()


async def get_session(
    session_id: str,
    token: str | None = Depends(bearer_token),
    sessions: SessionRegistry = Depends(get_registry),
) -> RegistrationSession:
    """Look up the caller's session. Sessions of other callers are reported as not found."""
    await sessions.prune_idle()
    session = sessions.get(session_id, token)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Registration session {session_id} not found")
    return session


async def release_if_complete(session: RegistrationSession, sessions: SessionRegistry) -> None:
    """Drop a session from the registry once it reaches COMPLETE."""
    if session.step.is_terminal:
        await sessions.discard(session.id)
