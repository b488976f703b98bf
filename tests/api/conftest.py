"""
API test configuration

The application is built without its lifespan (no database, no auth
provider) and driven in-process through httpx's ASGI transport. Callers
and services are injected through ``app.dependency_overrides``.
"""
from typing import Callable

import httpx
import pytest
import pytest_asyncio

from core.auth_dependencies import get_current_user
from core.jwt_manager import AuthUser, UserRole
from services.main import create_app
from tests.fixtures import make_auth_user


@pytest.fixture
def app():
    application = create_app(use_lifespan=False)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def act_as(app) -> Callable[..., AuthUser]:
    """Authenticate every request as a user with ``role``"""

    def _act_as(role: UserRole = UserRole.MANAGER, store_id=None) -> AuthUser:
        user = make_auth_user(role=role, store_id=store_id)
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    return _act_as


@pytest_asyncio.fixture
async def client(app):
    """Async HTTP client bound to the ASGI app; unhandled errors become 500 responses"""
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client


def assert_error(response: httpx.Response, status_code: int, path: str):
    """Error envelope shared by every failure"""
    assert response.status_code == status_code, response.text
    body = response.json()
    assert body["success"] is False
    assert body["statusCode"] == status_code
    assert body["path"] == path
    assert "timestamp" in body
    return body
