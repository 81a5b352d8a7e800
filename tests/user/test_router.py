"""Tests for user domain router."""

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from fitback.user.models import User


@pytest.fixture(name="other_user")
def other_user_fixture(session: Session) -> User:
    user = User(
        email="other@example.com",
        password_hash="$2b$04$notarealhashbutstoredasis",
        user_name="Other",
        age=41,
        fitness_goal="flexibility",
        fitness_level="advanced",
        subscription_status="premium",
        email_verified=True,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


# --- auth gate ---


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("get", "/api/private/getallusers"),
        ("get", f"/api/private/getuserbyid/{uuid.uuid4()}"),
        ("delete", "/api/private/deleteall"),
        ("delete", f"/api/private/deletebyid/{uuid.uuid4()}"),
        ("put", f"/api/private/editbyid/{uuid.uuid4()}"),
    ],
)
def test_private_routes_require_token(
    client: TestClient, session: Session, test_user: User, method: str, path: str
):
    kwargs = {"json": {"userName": "x"}} if method == "put" else {}

    response = client.request(method.upper(), path, **kwargs)

    assert response.status_code == 401
    assert response.json()["type"] == "not_authenticated"
    assert session.exec(select(User)).all()


def test_private_route_rejects_invalid_token(client: TestClient, test_user: User):
    response = client.get(
        "/api/private/getallusers", headers={"Authorization": "Bearer garbage"}
    )

    assert response.status_code == 401
    assert response.json()["type"] == "invalid_token"


# --- GET /api/private/getallusers ---


def test_list_users(
    client: TestClient, test_user: User, other_user: User, auth_headers
):
    response = client.get("/api/private/getallusers", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert {u["email"] for u in data} == {test_user.email, other_user.email}
    for user in data:
        assert "passwordHash" not in user
        assert "password_hash" not in user
        assert "pendingEmailVerificationToken" not in user


def test_list_users_uses_camel_case(client: TestClient, test_user: User, auth_headers):
    data = client.get("/api/private/getallusers", headers=auth_headers).json()

    assert data[0]["userName"] == "Test User"
    assert data[0]["fitnessGoal"] == "strength"
    assert data[0]["emailVerified"] is True
    assert data[0]["createdAt"].endswith("Z")


# --- GET /api/private/getuserbyid/{id} ---


def test_get_user_by_id(
    client: TestClient, other_user: User, auth_headers
):
    response = client.get(
        f"/api/private/getuserbyid/{other_user.id}", headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == str(other_user.id)
    assert data["subscriptionStatus"] == "premium"


def test_get_user_not_found(client: TestClient, auth_headers):
    response = client.get(
        f"/api/private/getuserbyid/{uuid.uuid4()}", headers=auth_headers
    )

    assert response.status_code == 404
    assert response.json() == {"type": "user_not_found", "message": "User not found"}


def test_get_user_malformed_id(client: TestClient, auth_headers):
    response = client.get("/api/private/getuserbyid/not-a-uuid", headers=auth_headers)

    assert response.status_code == 400


# --- DELETE /api/private/deletebyid/{id} ---


def test_delete_user(
    client: TestClient, session: Session, other_user: User, auth_headers
):
    user_id = other_user.id

    response = client.delete(
        f"/api/private/deletebyid/{user_id}", headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == {"message": "User deleted successfully"}
    assert session.get(User, user_id) is None


def test_delete_user_not_found(client: TestClient, auth_headers):
    response = client.delete(
        f"/api/private/deletebyid/{uuid.uuid4()}", headers=auth_headers
    )

    assert response.status_code == 404


def test_delete_self_then_token_still_accepted(
    client: TestClient, test_user: User, auth_headers
):
    client.delete(f"/api/private/deletebyid/{test_user.id}", headers=auth_headers)

    response = client.get("/api/private/getallusers", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == []


# --- DELETE /api/private/deleteall ---


def test_delete_all_users(
    client: TestClient, session: Session, other_user: User, auth_headers
):
    response = client.delete("/api/private/deleteall", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "All users deleted successfully"}
    assert session.exec(select(User)).all() == []


# --- PUT /api/private/editbyid/{id} ---


def test_edit_user_profile_fields(
    client: TestClient, session: Session, other_user: User, auth_headers
):
    response = client.put(
        f"/api/private/editbyid/{other_user.id}",
        json={"userName": "Renamed", "age": 42},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["userName"] == "Renamed"
    assert data["age"] == 42
    assert data["fitnessLevel"] == "advanced"

    session.refresh(other_user)
    assert other_user.user_name == "Renamed"


def test_edit_user_ignores_credentials_and_verification(
    client: TestClient, session: Session, other_user: User, auth_headers
):
    before = other_user.password_hash

    response = client.put(
        f"/api/private/editbyid/{other_user.id}",
        json={"passwordHash": "x", "emailVerified": False, "userName": "Still"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    session.refresh(other_user)
    assert other_user.password_hash == before
    assert other_user.email_verified is True


def test_edit_user_email(
    client: TestClient, session: Session, other_user: User, auth_headers
):
    response = client.put(
        f"/api/private/editbyid/{other_user.id}",
        json={"email": "renamed@example.com"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["email"] == "renamed@example.com"


def test_edit_user_email_conflict(
    client: TestClient, test_user: User, other_user: User, auth_headers
):
    response = client.put(
        f"/api/private/editbyid/{other_user.id}",
        json={"email": test_user.email},
        headers=auth_headers,
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Email already in use"


def test_edit_user_not_found(client: TestClient, auth_headers):
    response = client.put(
        f"/api/private/editbyid/{uuid.uuid4()}",
        json={"userName": "Nobody"},
        headers=auth_headers,
    )

    assert response.status_code == 404


def test_edit_user_invalid_age(client: TestClient, other_user: User, auth_headers):
    response = client.put(
        f"/api/private/editbyid/{other_user.id}",
        json={"age": -3},
        headers=auth_headers,
    )

    assert response.status_code == 400
