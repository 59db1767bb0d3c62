"""
Integration tests for registration and login over HTTP.
"""

import pytest
from sqlalchemy import func, select, update
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import User


async def _user_count(ctx) -> int:
    async with ctx.session_factory() as session:
        return (await session.execute(select(func.count()).select_from(User))).scalar_one()


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_returns_user_and_token(self, client, alice):
        response = await client.post("/register", json=alice)

        assert response.status_code == 201
        data = response.json()
        assert data["user"]["username"] == "alice"
        assert data["user"]["email"] == "alice@example.com"
        assert data["user"]["monthlyIncome"] == 3000
        assert isinstance(data["token"], str) and data["token"]

    @pytest.mark.asyncio
    async def test_response_never_contains_password(self, client, alice):
        response = await client.post("/register", json=alice)
        user = response.json()["user"]
        assert not any("password" in key.lower() for key in user)
        assert "secret123" not in response.text

    @pytest.mark.asyncio
    async def test_password_stored_hashed(self, client, ctx, alice):
        await client.post("/register", json=alice)
        async with ctx.session_factory() as session:
            user = (await session.execute(select(User))).scalar_one()
        assert user.hashed_password != "secret123"
        assert ctx.hasher.verify("secret123", user.hashed_password)

    @pytest.mark.asyncio
    async def test_duplicate_username_conflicts(self, client, ctx, alice):
        first = await client.post("/register", json=alice)
        second = await client.post(
            "/register", json={**alice, "email": "other@example.com"}
        )

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json() == {"error": "User already exists"}
        assert await _user_count(ctx) == 1

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, client, ctx, alice):
        await client.post("/register", json=alice)
        response = await client.post("/register", json={**alice, "username": "alice2"})

        assert response.status_code == 409
        assert await _user_count(ctx) == 1

    @pytest.mark.asyncio
    async def test_identical_request_twice(self, client, ctx, alice):
        await client.post("/register", json=alice)
        response = await client.post("/register", json=alice)

        assert response.status_code == 409
        assert response.json()["error"] == "User already exists"
        assert await _user_count(ctx) == 1

    @pytest.mark.asyncio
    async def test_unique_constraint_catches_race(self, client, ctx, alice, monkeypatch):
        """If the advisory existence check misses, the constraint still wins."""
        from core.result import Result

        await client.post("/register", json=alice)

        async def _nobody(session, username, email):
            return Result.success(None)

        monkeypatch.setattr("auth.service.find_user_by_username_or_email", _nobody)
        response = await client.post("/register", json=alice)

        assert response.status_code == 409
        assert await _user_count(ctx) == 1

    @pytest.mark.asyncio
    async def test_hashing_failure_is_internal_error(self, client, ctx, alice, monkeypatch):
        def _boom(password):
            raise ValueError("hash backend down")

        monkeypatch.setattr(ctx.hasher, "hash", _boom)
        response = await client.post("/register", json=alice)

        assert response.status_code == 500
        assert "hash backend down" not in response.text
        assert await _user_count(ctx) == 0

    @pytest.mark.asyncio
    async def test_storage_failure_on_insert_is_internal_error(self, client, ctx, alice, monkeypatch):
        async def _flush_fails(self, objects=None):
            raise OperationalError("INSERT INTO users", {}, Exception("disk full"))

        monkeypatch.setattr(AsyncSession, "flush", _flush_fails)
        response = await client.post("/register", json=alice)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}
        assert "disk full" not in response.text
        monkeypatch.undo()
        assert await _user_count(ctx) == 0


class TestLogin:
    @pytest.mark.asyncio
    async def test_fresh_user_can_log_in(self, client, ctx, alice):
        await client.post("/register", json=alice)
        response = await client.post(
            "/login", json={"username": "alice", "password": "secret123"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["username"] == "alice"
        assert "hashed_password" not in data["user"]
        identity = ctx.tokens.verify(data["token"])
        assert identity.username == "alice"
        assert identity.user_id == data["user"]["id"]

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_user_look_identical(self, client, alice):
        await client.post("/register", json=alice)
        wrong_password = await client.post(
            "/login", json={"username": "alice", "password": "wrong"}
        )
        unknown_user = await client.post(
            "/login", json={"username": "nobody", "password": "secret123"}
        )

        assert wrong_password.status_code == unknown_user.status_code == 401
        assert wrong_password.json() == unknown_user.json() == {"error": "Invalid credentials"}

    @pytest.mark.asyncio
    async def test_login_by_email_is_not_supported(self, client, alice):
        await client.post("/register", json=alice)
        response = await client.post(
            "/login", json={"username": "alice@example.com", "password": "secret123"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_corrupt_stored_hash_is_internal_error(self, client, ctx, alice):
        await client.post("/register", json=alice)
        async with ctx.session_factory() as session:
            await session.execute(
                update(User).where(User.username == "alice").values(hashed_password="garbage")
            )
            await session.commit()

        response = await client.post(
            "/login", json={"username": "alice", "password": "secret123"}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}

    @pytest.mark.asyncio
    async def test_overlong_password_is_validation_error(self, client, alice):
        await client.post("/register", json=alice)
        response = await client.post(
            "/login", json={"username": "alice", "password": "é" * 40}
        )

        assert response.status_code == 400
        assert [d["field"] for d in response.json()["details"]] == ["password"]
