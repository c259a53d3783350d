from dataclasses import replace

import httpx
import pytest

from app.main import app
from app.core.exceptions import IdentityServiceUnavailableError
from app.core.security import create_access_token, verify_access_token
from app.services.identity_service import (
    FallbackIdentityProvider,
    HttpIdentityProvider,
    StubIdentityProvider,
    build_identity_provider,
    get_identity_provider,
)


def mock_upstream(handler):
    return HttpIdentityProvider(base_url="http://food-ordering.test", transport=httpx.MockTransport(handler))


async def test_http_provider_returns_user():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        return httpx.Response(
            200,
            json={"id": 7, "username": "nok", "name": "Nok", "role": "admin", "isActive": True},
        )

    user = await mock_upstream(handler).validate(7)

    assert seen["url"] == "http://food-ordering.test/api/auth/users/7"
    assert user.id == 7
    assert user.role == "ADMIN"
    assert user.is_admin


async def test_http_provider_unknown_user():
    provider = mock_upstream(lambda request: httpx.Response(404, json={"message": "Not found"}))
    assert await provider.validate(42) is None


async def test_http_provider_upstream_error():
    provider = mock_upstream(lambda request: httpx.Response(500))
    with pytest.raises(IdentityServiceUnavailableError):
        await provider.validate(1)


async def test_http_provider_unreachable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(IdentityServiceUnavailableError):
        await mock_upstream(handler).validate(1)


async def test_stub_rejects_unknown_ids():
    stub = StubIdentityProvider()
    assert (await stub.validate(1)).role == "ADMIN"
    assert (await stub.validate(3)).username == "chef"
    assert await stub.validate(99) is None


async def test_fallback_used_only_when_upstream_unreachable():
    def down(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    provider = FallbackIdentityProvider(mock_upstream(down), StubIdentityProvider())
    assert (await provider.validate(2)).username == "staff"
    assert await provider.validate(99) is None

    provider = FallbackIdentityProvider(
        mock_upstream(lambda request: httpx.Response(404)), StubIdentityProvider(),
    )
    assert await provider.validate(1) is None


def test_provider_selection():
    assert isinstance(build_identity_provider("stub"), StubIdentityProvider)
    assert isinstance(build_identity_provider("http", fallback_to_stub=False), HttpIdentityProvider)
    assert isinstance(build_identity_provider("http", fallback_to_stub=True), FallbackIdentityProvider)
    with pytest.raises(ValueError):
        build_identity_provider("ldap")
    assert isinstance(get_identity_provider(), StubIdentityProvider)


def test_token_subject_is_integer_user_id():
    assert verify_access_token(create_access_token(3)) == 3
    assert verify_access_token("garbage") is None


async def test_inactive_user_rejected(client, org):
    class InactiveProvider(StubIdentityProvider):
        async def validate(self, user_id):
            user = await super().validate(user_id)
            return replace(user, is_active=False) if user else None

    app.dependency_overrides[get_identity_provider] = InactiveProvider

    response = await client.get(
        "/api/v1/auth/profile",
        headers={"Authorization": f"Bearer {create_access_token(1)}"},
    )
    assert response.status_code == 401


async def test_unreachable_identity_service_returns_503(client, org):
    def down(request):
        raise httpx.ConnectError("connection refused", request=request)

    app.dependency_overrides[get_identity_provider] = lambda: mock_upstream(down)

    response = await client.get(
        "/api/v1/auth/profile",
        headers={"Authorization": f"Bearer {create_access_token(1)}"},
    )
    assert response.status_code == 503


async def test_profile(client, admin_headers):
    response = await client.get("/api/v1/auth/profile", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"id": 1, "username": "admin", "name": "Admin User", "role": "ADMIN"}
