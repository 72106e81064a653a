"""
Tests for registration, login, token handling and identity resolution.
"""
from datetime import timedelta

import pytest
from jose import jwt

from pricecheck.errors import UnauthenticatedError
from pricecheck.models import Role, User
from pricecheck.services.auth import (
    _create_token,
    create_access_token,
    create_refresh_token,
    hash_password,
    resolve_identity,
    verify_password,
)
from conftest import TEST_PASSWORD


class TestPasswordHashing:
    def test_hash_and_verify(self, password_hash):
        assert password_hash != TEST_PASSWORD
        assert verify_password(TEST_PASSWORD, password_hash)
        assert not verify_password("wrong-password", password_hash)

    def test_hashes_are_salted(self, password_hash):
        assert hash_password(TEST_PASSWORD) != password_hash


class TestResolveIdentity:
    def test_valid_access_token(self, test_db, settings, verified_user):
        token = create_access_token(verified_user, settings)

        identity = resolve_identity(test_db, token, settings)

        assert identity.user_id == verified_user.id
        assert identity.email == "verified@example.com"
        assert identity.role == Role.VERIFIED

    def test_missing_token(self, test_db, settings):
        with pytest.raises(UnauthenticatedError):
            resolve_identity(test_db, None, settings)

    def test_garbage_token(self, test_db, settings):
        with pytest.raises(UnauthenticatedError):
            resolve_identity(test_db, "not-a-jwt", settings)

    def test_wrong_signature(self, test_db, settings, basic_user):
        token = jwt.encode({"sub": str(basic_user.id), "type": "access"}, "other-secret", algorithm="HS256")

        with pytest.raises(UnauthenticatedError):
            resolve_identity(test_db, token, settings)

    def test_expired_token(self, test_db, settings, basic_user):
        token, _ = _create_token(basic_user, "access", timedelta(minutes=-5), settings)

        with pytest.raises(UnauthenticatedError):
            resolve_identity(test_db, token, settings)

    def test_refresh_token_is_not_an_access_token(self, test_db, settings, basic_user):
        token, _ = create_refresh_token(basic_user, settings)

        with pytest.raises(UnauthenticatedError):
            resolve_identity(test_db, token, settings)

    def test_deleted_user(self, test_db, settings, basic_user):
        token = create_access_token(basic_user, settings)
        test_db.delete(basic_user)
        test_db.commit()

        with pytest.raises(UnauthenticatedError):
            resolve_identity(test_db, token, settings)

    def test_role_read_from_database(self, test_db, settings, basic_user):
        token = create_access_token(basic_user, settings)
        basic_user.role = Role.ADMIN
        test_db.commit()

        assert resolve_identity(test_db, token, settings).role == Role.ADMIN


class TestAuthEndpoints:
    def test_register(self, client, test_db):
        response = client.post("/auth/register", json={
            "email": "new@example.com",
            "password": "long-enough-password",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "new@example.com"
        assert data["role"] == "BASIC"
        user = test_db.query(User).filter(User.email == "new@example.com").one()
        assert user.hashed_password != "long-enough-password"

    def test_register_duplicate_email(self, client, basic_user):
        response = client.post("/auth/register", json={
            "email": "basic@example.com",
            "password": "long-enough-password",
        })

        assert response.status_code == 409

    def test_register_short_password(self, client):
        response = client.post("/auth/register", json={"email": "new@example.com", "password": "short"})

        assert response.status_code == 400

    def test_login(self, client, verified_user):
        response = client.post("/auth/login", json={
            "email": "verified@example.com",
            "password": TEST_PASSWORD,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["accessToken"]
        assert data["refreshToken"]
        assert data["user"] == {
            "userId": verified_user.id,
            "email": "verified@example.com",
            "role": "VERIFIED",
        }

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {data['accessToken']}"})
        assert me.status_code == 200
        assert me.json()["email"] == "verified@example.com"

    def test_login_wrong_password(self, client, basic_user):
        response = client.post("/auth/login", json={"email": "basic@example.com", "password": "nope-nope"})

        assert response.status_code == 401
        assert response.json() == {"detail": "Incorrect email or password"}

    def test_login_unknown_email(self, client):
        response = client.post("/auth/login", json={"email": "ghost@example.com", "password": "whatever"})

        assert response.status_code == 401
        assert response.json() == {"detail": "Incorrect email or password"}

    def test_me_without_token(self, client):
        response = client.get("/auth/me")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_refresh_without_redis(self, client, basic_user, settings):
        refresh_token, _ = create_refresh_token(basic_user, settings)

        response = client.post("/auth/refresh", json={"refreshToken": refresh_token})

        assert response.status_code == 200
        assert response.json()["refreshToken"] != refresh_token

    def test_refresh_with_access_token(self, client, basic_headers):
        access_token = basic_headers["Authorization"].split()[1]

        response = client.post("/auth/refresh", json={"refreshToken": access_token})

        assert response.status_code == 401

    def test_logout(self, client, basic_user, settings):
        refresh_token, _ = create_refresh_token(basic_user, settings)

        response = client.post("/auth/logout", json={"refreshToken": refresh_token})

        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}


class TestUserAdministration:
    def test_list_users_requires_admin(self, client, basic_headers, admin_headers):
        assert client.get("/users", headers=basic_headers).status_code == 403

        response = client.get("/users", headers=admin_headers)
        assert response.status_code == 200
        assert {u["email"] for u in response.json()} == {"basic@example.com", "admin@example.com"}

    def test_promote_user(self, client, admin_headers, basic_user, basic_headers):
        response = client.patch(
            f"/users/{basic_user.id}/role", headers=admin_headers, json={"role": "VERIFIED"}
        )

        assert response.status_code == 200
        assert response.json()["role"] == "VERIFIED"

        # Existing token picks up the new role
        response = client.post("/products", headers=basic_headers, json={
            "name": "Promoted Product",
            "category": "OTHER",
        })
        assert response.status_code == 201

    def test_promote_unknown_user(self, client, admin_headers):
        response = client.patch("/users/999/role", headers=admin_headers, json={"role": "ADMIN"})

        assert response.status_code == 404
        assert client.patch(
            f"/users/{10**20}/role", headers=admin_headers, json={"role": "ADMIN"}
        ).status_code == 404

    def test_invalid_role(self, client, admin_headers, basic_user):
        response = client.patch(
            f"/users/{basic_user.id}/role", headers=admin_headers, json={"role": "SUPERUSER"}
        )

        assert response.status_code == 400
