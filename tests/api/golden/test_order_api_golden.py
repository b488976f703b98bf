"""
Order API Golden Tests

HTTP contract for /orders: envelope, status codes, role checks and
bearer token authentication.

Usage:
    pytest tests/api/golden/test_order_api_golden.py -v
"""
import pytest

from core.config import SupabaseConfig
from core.jwt_manager import MISSING_ROLE_MESSAGE, JWTManager, UserRole
from services.dependencies import get_order_service
from services.order_service.order_service import OrderService
from tests.api.conftest import assert_error
from tests.component.golden.order_service.mocks import MockOrderRepository
from tests.fixtures import make_token

pytestmark = [pytest.mark.api, pytest.mark.golden, pytest.mark.asyncio]

SECRET = "api-test-jwt-secret-at-least-32-bytes-long"


@pytest.fixture
def order_repo(app):
    repo = MockOrderRepository()
    repo.set_store(1, "District 1")
    repo.set_store(2, "District 7")
    repo.set_item(10, price="12.50")
    app.dependency_overrides[get_order_service] = lambda: OrderService(repository=repo)
    return repo


@pytest.fixture
def token_auth(monkeypatch):
    """Verify real HS256 tokens instead of overriding the caller"""
    monkeypatch.setattr("core.jwt_manager._jwt_manager", JWTManager(SupabaseConfig(jwt_secret=SECRET)))


class TestOrderEndpointsGolden:

    async def test_list_envelope(self, client, act_as, order_repo):
        act_as(UserRole.MANAGER)
        order_repo.set_order(store_id=1)

        response = await client.get("/orders", params={"page": 1, "limit": 5})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["meta"] == {"total": 1, "page": 1, "limit": 5, "totalPages": 1}
        assert body["data"]["data"][0]["storeName"] == "District 1"

    async def test_create_returns_201(self, client, act_as, order_repo):
        user = act_as(UserRole.STORE_STAFF, store_id=1)

        response = await client.post("/orders", json={
            "storeId": 1,
            "deliveryDate": "2026-02-01",
            "items": [{"itemId": 10, "quantity": 2}],
        })

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["orderCode"].startswith("ORD-")
        assert data["status"] == "pending"
        assert data["totalAmount"] == 25.0
        assert data["createdBy"] == user.id
        assert data["items"][0]["unitPrice"] == 12.5

    async def test_empty_items_is_400(self, client, act_as, order_repo):
        act_as(UserRole.MANAGER)

        response = await client.post("/orders", json={"storeId": 1, "items": []})

        body = assert_error(response, 400, "/orders")
        assert any("at least one item" in message for message in body["message"])

    async def test_bad_query_is_400(self, client, act_as, order_repo):
        act_as(UserRole.MANAGER)
        response = await client.get("/orders", params={"page": 0})
        assert_error(response, 400, "/orders")

    async def test_store_staff_cannot_list_all(self, client, act_as, order_repo):
        act_as(UserRole.STORE_STAFF, store_id=1)

        response = await client.get("/orders")

        body = assert_error(response, 403, "/orders")
        assert body["message"] == "Role 'store_staff' is not allowed to perform this action"

    async def test_store_listing_guard(self, client, act_as, order_repo):
        act_as(UserRole.STORE_STAFF, store_id=1)

        assert (await client.get("/orders/store/1")).status_code == 200
        body = assert_error(await client.get("/orders/store/2"), 403, "/orders/store/2")
        assert body["message"] == "You can only access your own store"

    async def test_missing_order_is_404(self, client, act_as, order_repo):
        act_as(UserRole.MANAGER)

        body = assert_error(await client.get("/orders/999"), 404, "/orders/999")

        assert body["message"] == "Order #999 not found"

    async def test_edit_non_pending_is_403(self, client, act_as, order_repo):
        act_as(UserRole.MANAGER)
        order_id = order_repo.set_order(status="approved")

        response = await client.put(f"/orders/{order_id}", json={"items": [{"itemId": 10, "quantity": 1}]})

        body = assert_error(response, 403, f"/orders/{order_id}")
        assert body["message"] == "Only pending orders can be edited"

    async def test_status_update(self, client, act_as, order_repo):
        user = act_as(UserRole.COORDINATOR)
        order_id = order_repo.set_order()

        response = await client.put(f"/orders/{order_id}/status", json={"status": "approved"})

        assert response.status_code == 200
        assert response.json()["data"]["confirmedBy"] == user.id

    async def test_terminal_status_is_400(self, client, act_as, order_repo):
        act_as(UserRole.MANAGER)
        order_id = order_repo.set_order(status="delivered")

        response = await client.put(f"/orders/{order_id}/status", json={"status": "pending"})

        assert_error(response, 400, f"/orders/{order_id}/status")

    async def test_ck_staff_cannot_set_status(self, client, act_as, order_repo):
        act_as(UserRole.CK_STAFF)
        order_id = order_repo.set_order()
        response = await client.put(f"/orders/{order_id}/status", json={"status": "approved"})
        assert_error(response, 403, f"/orders/{order_id}/status")

    async def test_unexpected_error_is_generic_500(self, client, act_as, order_repo):
        act_as(UserRole.MANAGER)
        order_repo.set_error(RuntimeError("connection reset by peer"))

        body = assert_error(await client.get("/orders"), 500, "/orders")

        assert body["message"] == "Internal server error"


class TestBearerAuthGolden:

    async def test_missing_header_is_401(self, client, order_repo):
        body = assert_error(await client.get("/orders"), 401, "/orders")
        assert body["message"] == "Authorization header required"

    async def test_wrong_scheme_is_401(self, client, order_repo):
        response = await client.get("/orders", headers={"Authorization": "Basic abc"})
        assert_error(response, 401, "/orders")

    async def test_valid_token(self, client, order_repo, token_auth):
        token = make_token(SECRET, role="manager")
        response = await client.get("/orders", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200

    async def test_token_role_enforced(self, client, order_repo, token_auth):
        token = make_token(SECRET, role="store_staff", store_id=1)
        response = await client.get("/orders", headers={"Authorization": f"Bearer {token}"})
        assert_error(response, 403, "/orders")

    async def test_expired_token(self, client, order_repo, token_auth):
        token = make_token(SECRET, expires_in=-30)
        response = await client.get("/orders", headers={"Authorization": f"Bearer {token}"})
        body = assert_error(response, 401, "/orders")
        assert body["message"] == "Token has expired"

    async def test_token_without_role(self, client, order_repo, token_auth):
        token = make_token(SECRET, role=None)
        response = await client.get("/orders", headers={"Authorization": f"Bearer {token}"})
        body = assert_error(response, 401, "/orders")
        assert body["message"] == MISSING_ROLE_MESSAGE
