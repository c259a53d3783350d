"""
Identity lookup against the food-ordering service.

Tokens are issued by the food-ordering service; this module resolves the
token subject (an integer user id) to a user record. Which provider is used
is decided by ``settings.IDENTITY_PROVIDER``:

- ``http``: GET {FOOD_ORDERING_SERVICE_URL}/api/auth/users/{id}
- ``stub``: fixed development users, unknown ids are rejected

With ``IDENTITY_FALLBACK_TO_STUB`` the http provider falls back to the stub
users when the upstream cannot be reached.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from app.config import settings
from app.core.exceptions import IdentityServiceUnavailableError

logger = logging.getLogger(__name__)

ADMIN_ROLE = "ADMIN"


@dataclass(frozen=True)
class IdentityUser:
    """User as known to the food-ordering service."""
    id: int
    username: str
    name: str
    role: str
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @classmethod
    def from_payload(cls, payload: dict) -> "IdentityUser":
        return cls(
            id=int(payload["id"]),
            username=payload.get("username", ""),
            name=payload.get("name", ""),
            role=str(payload.get("role", "")).upper(),
            is_active=bool(payload.get("isActive", payload.get("is_active", True))),
        )


class IdentityProvider:
    """Resolves a user id to an IdentityUser, or None if unknown."""

    name = "base"

    async def validate(self, user_id: int) -> Optional[IdentityUser]:
        raise NotImplementedError


class StubIdentityProvider(IdentityProvider):
    """Fixed development users."""

    name = "stub"

    USERS: Dict[int, IdentityUser] = {
        1: IdentityUser(id=1, username="admin", name="Admin User", role="ADMIN"),
        2: IdentityUser(id=2, username="staff", name="Staff User", role="STAFF"),
        3: IdentityUser(id=3, username="chef", name="Chef User", role="CHEF"),
    }

    async def validate(self, user_id: int) -> Optional[IdentityUser]:
        return self.USERS.get(user_id)


class HttpIdentityProvider(IdentityProvider):
    """Looks users up in the food-ordering service over HTTP."""

    name = "http"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.FOOD_ORDERING_SERVICE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.IDENTITY_TIMEOUT_SECONDS
        self.transport = transport

    async def validate(self, user_id: int) -> Optional[IdentityUser]:
        """
        Fetch a user from the food-ordering service.

        Returns:
            The user, or None when the upstream reports it as not found

        Raises:
            IdentityServiceUnavailableError: upstream unreachable or failing
        """
        url = f"{self.base_url}/api/auth/users/{user_id}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, headers={"Content-Type": "application/json"})
        except httpx.HTTPError as e:
            logger.error(f"Identity service request failed for user {user_id}: {e}")
            raise IdentityServiceUnavailableError("Identity service unavailable")

        if response.status_code == 404:
            logger.warning(f"User {user_id} not found in food-ordering service")
            return None

        if response.status_code != 200:
            logger.error(f"Identity service error: HTTP {response.status_code}")
            raise IdentityServiceUnavailableError(
                "Identity service unavailable",
                {"status_code": response.status_code},
            )

        try:
            return IdentityUser.from_payload(response.json())
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Malformed identity payload for user {user_id}: {e}")
            raise IdentityServiceUnavailableError("Identity service returned an invalid response")


class FallbackIdentityProvider(IdentityProvider):
    """Uses the primary provider, switching to the fallback when it is unreachable."""

    name = "fallback"

    def __init__(self, primary: IdentityProvider, fallback: IdentityProvider):
        self.primary = primary
        self.fallback = fallback

    async def validate(self, user_id: int) -> Optional[IdentityUser]:
        try:
            return await self.primary.validate(user_id)
        except IdentityServiceUnavailableError:
            logger.warning(
                f"Identity provider '{self.primary.name}' unavailable, "
                f"using '{self.fallback.name}' users for user {user_id}"
            )
            return await self.fallback.validate(user_id)


def build_identity_provider(
    provider: Optional[str] = None,
    fallback_to_stub: Optional[bool] = None,
) -> IdentityProvider:
    """Build the provider selected by configuration."""
    provider = (provider or settings.IDENTITY_PROVIDER).lower()
    if fallback_to_stub is None:
        fallback_to_stub = settings.IDENTITY_FALLBACK_TO_STUB

    if provider == "stub":
        return StubIdentityProvider()
    if provider == "http":
        http_provider = HttpIdentityProvider()
        if fallback_to_stub:
            return FallbackIdentityProvider(http_provider, StubIdentityProvider())
        return http_provider
    raise ValueError(f"Unknown identity provider: {provider}")


_provider: Optional[IdentityProvider] = None


def get_identity_provider() -> IdentityProvider:
    """Process-wide provider instance; used as a FastAPI dependency."""
    global _provider
    if _provider is None:
        _provider = build_identity_provider()
        logger.info(f"Identity provider: {_provider.name}")
    return _provider
