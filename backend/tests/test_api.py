"""HTTP tests through the ASGI app."""

from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from employee_api.database import get_db
from employee_api.main import create_app
from employee_api.repositories.employee_repository import EmployeeRepository
from employee_api.repositories.unit_of_work import SqlAlchemyUnitOfWork
from employee_api.services.employee_directory import EmployeeDirectory

ADMIN_EMAIL = "admin@empresa.com"
ADMIN_PASSWORD = "Admin@123"


@pytest_asyncio.fixture
async def client(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    async with session_maker() as session:
        directory = EmployeeDirectory(EmployeeRepository(session), SqlAlchemyUnitOfWork(session))
        await directory.seed_default_director(ADMIN_EMAIL, ADMIN_PASSWORD, "00000000000")

    app = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


async def _login(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    response = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest_asyncio.fixture
async def admin_headers(client: AsyncClient) -> dict[str, str]:
    return await _login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


def _employee_payload(**overrides) -> dict:
    payload = {
        "first_name": "Joao",
        "last_name": "Pereira",
        "email": "joao@empresa.com",
        "document_number": "12345678900",
        "password": "Joao@2024",
        "birth_date": "1992-08-01",
        "role": 1,
        "manager_id": None,
        "phones": [
            {"number": "11911112222", "type": "Mobile"},
            {"number": "1133334444", "type": "Office"},
        ],
    }
    payload.update(overrides)
    return payload


async def _create(client: AsyncClient, headers: dict[str, str], **overrides) -> dict:
    response = await client.post(
        "/api/v1/employees", json=_employee_payload(**overrides), headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:
    """Test the health endpoint."""

    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
        assert response.headers["X-Content-Type-Options"] == "nosniff"


class TestAuthEndpoints:
    """Test login over HTTP."""

    async def test_login_returns_token_and_employee(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token"]
        assert body["expires_at"]
        assert body["employee"]["email"] == ADMIN_EMAIL
        assert body["employee"]["role"] == 3
        assert "password_hash" not in body["employee"]

    async def test_login_failures_look_the_same(self, client: AsyncClient) -> None:
        unknown = await client.post(
            "/api/v1/auth/login", json={"email": "nobody@empresa.com", "password": ADMIN_PASSWORD}
        )
        wrong = await client.post(
            "/api/v1/auth/login", json={"email": ADMIN_EMAIL, "password": "Wrong@123"}
        )

        assert unknown.status_code == wrong.status_code == 400
        assert unknown.json() == wrong.json() == {"detail": "Invalid email or password"}

    async def test_login_validation(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/auth/login", json={"email": "not-an-email"})

        assert response.status_code == 422


class TestEmployeeEndpoints:
    """Test the employee routes end to end."""

    async def test_requires_authentication(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/employees")

        assert response.status_code == 401
        assert response.json() == {"detail": "Authentication required"}

    async def test_invalid_token(self, client: AsyncClient) -> None:
        response = await client.get(
            "/api/v1/employees", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401

    async def test_create_and_read(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        me = (await client.get("/api/v1/employees/me", headers=admin_headers)).json()

        response = await client.post(
            "/api/v1/employees",
            json=_employee_payload(manager_id=me["id"]),
            headers=admin_headers,
        )

        assert response.status_code == 201
        created = response.json()
        assert response.headers["Location"] == f"/api/v1/employees/{created['id']}"
        assert created["full_name"] == "Joao Pereira"
        assert created["role_name"] == "EMPLOYEE"
        assert created["manager_name"] == "Admin Sistema"
        assert {(p["number"], p["type"]) for p in created["phones"]} == {
            ("11911112222", "Mobile"),
            ("1133334444", "Office"),
        }

        fetched = await client.get(f"/api/v1/employees/{created['id']}", headers=admin_headers)
        assert fetched.status_code == 200
        assert fetched.json()["email"] == "joao@empresa.com"

        listed = await client.get("/api/v1/employees", headers=admin_headers)
        assert [e["email"] for e in listed.json()] == [ADMIN_EMAIL, "joao@empresa.com"]

        subordinates = await client.get(
            f"/api/v1/employees/manager/{me['id']}/subordinates", headers=admin_headers
        )
        assert [e["id"] for e in subordinates.json()] == [created["id"]]

    async def test_new_employee_can_log_in(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        created = await _create(client, admin_headers)

        headers = await _login(client, "JOAO@empresa.com", "Joao@2024")
        me = await client.get("/api/v1/employees/me", headers=headers)

        assert me.json()["id"] == created["id"]

    async def test_role_escalation_is_rejected(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        await _create(client, admin_headers)
        headers = await _login(client, "joao@empresa.com", "Joao@2024")

        response = await client.post(
            "/api/v1/employees",
            json=_employee_payload(email="lider@empresa.com", document_number="999", role=2),
            headers=headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == (
            "Insufficient role to assign role LEADER. Your current role is EMPLOYEE."
        )

    async def test_duplicate_email(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/v1/employees",
            json=_employee_payload(email=ADMIN_EMAIL),
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == f"Email '{ADMIN_EMAIL}' is already registered"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"phones": []},
            {"password": "weak"},
            {"birth_date": "2020-01-01"},
            {"role": 4},
            {"first_name": ""},
            {"phones": [{"number": "1" * 21}]},
        ],
    )
    async def test_invalid_payload(
        self, client: AsyncClient, admin_headers: dict[str, str], overrides: dict
    ) -> None:
        response = await client.post(
            "/api/v1/employees", json=_employee_payload(**overrides), headers=admin_headers
        )

        assert response.status_code == 422

    async def test_update_employee(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        created = await _create(client, admin_headers)
        payload = _employee_payload(first_name="Joana", role=2)
        del payload["password"], payload["document_number"]
        payload["phones"] = [{"id": created["phones"][0]["id"], "number": "11900001111"}]

        response = await client.put(
            f"/api/v1/employees/{created['id']}", json=payload, headers=admin_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["first_name"] == "Joana"
        assert body["role"] == 2
        assert body["document_number"] == "12345678900"
        assert [p["number"] for p in body["phones"]] == ["11900001111"]
        assert body["phones"][0]["id"] == created["phones"][0]["id"]
        assert body["updated_at"] is not None

    async def test_update_self_as_manager(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        created = await _create(client, admin_headers)
        payload = _employee_payload(manager_id=created["id"])
        del payload["password"], payload["document_number"]

        response = await client.put(
            f"/api/v1/employees/{created['id']}", json=payload, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "An employee cannot be their own manager"

    async def test_delete_is_logical(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        created = await _create(client, admin_headers)

        response = await client.delete(
            f"/api/v1/employees/{created['id']}", headers=admin_headers
        )

        assert response.status_code == 204
        listed = await client.get("/api/v1/employees", headers=admin_headers)
        assert created["id"] not in {e["id"] for e in listed.json()}
        fetched = await client.get(f"/api/v1/employees/{created['id']}", headers=admin_headers)
        assert fetched.json()["is_active"] is False

        login = await client.post(
            "/api/v1/auth/login", json={"email": "joao@empresa.com", "password": "Joao@2024"}
        )
        assert login.status_code == 400
        assert login.json()["detail"] == "Account is inactive. Contact your administrator."

    async def test_change_password(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/v1/employees/change-password",
            json={"current_password": ADMIN_PASSWORD, "new_password": "Changed@456"},
            headers=admin_headers,
        )

        assert response.status_code == 204
        await _login(client, ADMIN_EMAIL, "Changed@456")

    async def test_change_password_wrong_current(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.post(
            "/api/v1/employees/change-password",
            json={"current_password": "Wrong@123", "new_password": "Changed@456"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Current password is incorrect"

    async def test_unknown_employee(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        missing = uuid4()

        response = await client.get(f"/api/v1/employees/{missing}", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == f"Employee with identifier '{missing}' was not found"

    async def test_malformed_id(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ) -> None:
        response = await client.get("/api/v1/employees/not-a-uuid", headers=admin_headers)

        assert response.status_code == 422
