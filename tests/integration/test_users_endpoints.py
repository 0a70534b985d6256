from __future__ import annotations

import base64
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from uuid import UUID, uuid4

import bcrypt
import pytest
import sqlalchemy as sa
from fastapi.testclient import TestClient

from apps.bookshelf_api.main import create_app
from bookshelf.config.settings import Settings
from bookshelf.infrastructure.db.metadata import users
from bookshelf.infrastructure.http.users_router import INVALID_CREDENTIALS_DETAIL

PASSWORD = "correct-horse-battery"


@dataclass
class ApiContext:
    client: TestClient
    engine: sa.Engine


@pytest.fixture()
def api(tmp_path: Path) -> Iterator[ApiContext]:
    db_path = tmp_path / "api.db"
    settings = Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{db_path}",
        PASSWORD_HASH_ITERATIONS=1_000,
    )
    engine = sa.create_engine(f"sqlite+pysqlite:///{db_path}")
    with TestClient(create_app(settings=settings)) as client:
        yield ApiContext(client=client, engine=engine)
    engine.dispose()


def _registration(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "firstname": "Ada",
        "name": "Lovelace",
        "age": 36,
        "email": "Ada@Example.org",
        "password": PASSWORD,
        "language": "en",
    }
    payload.update(overrides)
    return payload


def _register(api: ApiContext, **overrides: object) -> str:
    response = api.client.post("/users", json=_registration(**overrides))
    assert response.status_code == 201
    return str(response.json()["id"])


def _insert_user(api: ApiContext, *, email: str, password_hash: str) -> UUID:
    user_id = uuid4()
    now = datetime.now(tz=UTC)
    with api.engine.begin() as connection:
        connection.execute(
            sa.insert(users).values(
                id=user_id,
                firstname="Grace",
                name="Hopper",
                age=85,
                language="en",
                email=email,
                password_hash=password_hash,
                is_admin=False,
                created_at=now,
                updated_at=now,
            )
        )
    return user_id


def _stored_hash(api: ApiContext, user_id: str) -> str:
    with api.engine.connect() as connection:
        return str(
            connection.execute(
                sa.select(users.c.password_hash).where(users.c.id == UUID(user_id))
            ).scalar_one()
        )


def test_register_stores_canonical_record_only(api: ApiContext) -> None:
    user_id = _register(api)

    stored = _stored_hash(api, user_id)

    assert PASSWORD not in stored
    assert len(base64.b64decode(stored, validate=True)) == 48


def test_register_rejects_duplicate_email_case_insensitively(api: ApiContext) -> None:
    _register(api)

    response = api.client.post("/users", json=_registration(email="ada@example.ORG"))

    assert response.status_code == 409


@pytest.mark.parametrize(
    "overrides",
    [
        {"email": "not-an-email"},
        {"password": "short"},
        {"age": "36"},
        {"isAdmin": "true"},
        {"nickname": "ada"},
    ],
)
def test_register_rejects_invalid_payload(api: ApiContext, overrides: dict[str, object]) -> None:
    response = api.client.post("/users", json=_registration(**overrides))

    assert response.status_code == 400
    assert PASSWORD not in response.text


def test_login_returns_public_profile(api: ApiContext) -> None:
    user_id = _register(api, isAdmin=True)

    response = api.client.post(
        "/users/login",
        json={"email": "ada@example.org", "password": PASSWORD},
    )

    assert response.status_code == 200
    profile = response.json()["data"]
    assert profile["id"] == user_id
    assert profile["email"] == "ada@example.org"
    assert profile["isAdmin"] is True
    assert "password_hash" not in profile
    assert "password" not in profile


def test_login_failures_are_indistinguishable(api: ApiContext) -> None:
    _register(api)

    wrong_password = api.client.post(
        "/users/login",
        json={"email": "ada@example.org", "password": "wrong-password"},
    )
    unknown_email = api.client.post(
        "/users/login",
        json={"email": "nobody@example.org", "password": PASSWORD},
    )

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"detail": INVALID_CREDENTIALS_DETAIL}


def test_login_with_legacy_bcrypt_record_upgrades_hash(api: ApiContext) -> None:
    legacy_hash = bcrypt.hashpw(PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")
    user_id = _insert_user(api, email="grace@example.org", password_hash=legacy_hash)

    failed = api.client.post(
        "/users/login",
        json={"email": "grace@example.org", "password": "wrong-password"},
    )
    assert failed.status_code == 401
    assert _stored_hash(api, str(user_id)) == legacy_hash

    response = api.client.post(
        "/users/login",
        json={"email": "grace@example.org", "password": PASSWORD},
    )

    assert response.status_code == 200
    upgraded = _stored_hash(api, str(user_id))
    assert upgraded != legacy_hash
    assert len(base64.b64decode(upgraded, validate=True)) == 48
    assert api.client.post(
        "/users/login",
        json={"email": "grace@example.org", "password": PASSWORD},
    ).status_code == 200


@pytest.mark.parametrize(
    "corrupt_record",
    [
        "not-valid-base64",
        base64.b64encode(b"\x01" * 47).decode("ascii"),
    ],
)
def test_corrupt_stored_record_fails_like_wrong_password(
    api: ApiContext,
    corrupt_record: str,
) -> None:
    _insert_user(api, email="grace@example.org", password_hash=corrupt_record)
    credentials = {"email": "grace@example.org", "password": PASSWORD}

    login = api.client.post("/users/login", json=credentials)
    delete = api.client.request("DELETE", "/users", json=credentials)
    unknown = api.client.post(
        "/users/login",
        json={"email": "nobody@example.org", "password": PASSWORD},
    )

    assert login.status_code == delete.status_code == unknown.status_code == 401
    expected = {"detail": INVALID_CREDENTIALS_DETAIL}
    assert login.json() == delete.json() == unknown.json() == expected


def test_credentials_never_reach_logs(
    api: ApiContext,
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO)
    legacy_hash = bcrypt.hashpw(PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")
    legacy_id = _insert_user(api, email="grace@example.org", password_hash=legacy_hash)
    user_id = _register(api)
    registered_hash = _stored_hash(api, user_id)

    api.client.post("/users/login", json={"email": "ada@example.org", "password": "wrong-secret"})
    api.client.post("/users/login", json={"email": "ada@example.org", "password": PASSWORD})
    api.client.post("/users/login", json={"email": "grace@example.org", "password": PASSWORD})
    upgraded_hash = _stored_hash(api, str(legacy_id))

    messages = [record.getMessage() for record in caplog.records]
    assert any("login_succeeded" in message for message in messages)
    assert any("password_hash_upgraded" in message for message in messages)
    secrets = [PASSWORD, "wrong-secret", legacy_hash, registered_hash, upgraded_hash]
    for message in messages:
        for secret in secrets:
            assert secret not in message


def test_patch_user_updates_profile(api: ApiContext) -> None:
    user_id = _register(api)

    response = api.client.patch(f"/users/{user_id}", json={"age": 37, "language": "de"})

    assert response.status_code == 200
    profile = response.json()["data"]
    assert profile["age"] == 37
    assert profile["language"] == "de"
    assert profile["firstname"] == "Ada"


def test_patch_user_error_statuses(api: ApiContext) -> None:
    user_id = _register(api)
    _register(api, email="other@example.org")

    unchanged = api.client.patch(f"/users/{user_id}", json={"firstname": "Ada"})
    taken = api.client.patch(f"/users/{user_id}", json={"email": "other@example.org"})
    unknown_key = api.client.patch(f"/users/{user_id}", json={"password": "new-password"})
    missing = api.client.patch(f"/users/{uuid4()}", json={"age": 40})
    malformed_id = api.client.patch("/users/not-a-uuid", json={"age": 40})

    assert unchanged.status_code == 409
    assert taken.status_code == 409
    assert unknown_key.status_code == 400
    assert missing.status_code == 404
    assert malformed_id.status_code == 400


def test_delete_account_requires_valid_credentials(api: ApiContext) -> None:
    _register(api)

    rejected = api.client.request(
        "DELETE",
        "/users",
        json={"email": "ada@example.org", "password": "wrong-password"},
    )
    deleted = api.client.request(
        "DELETE",
        "/users",
        json={"email": "ada@example.org", "password": PASSWORD},
    )
    login_after = api.client.post(
        "/users/login",
        json={"email": "ada@example.org", "password": PASSWORD},
    )

    assert rejected.status_code == 401
    assert rejected.json() == {"detail": INVALID_CREDENTIALS_DETAIL}
    assert deleted.status_code == 204
    assert login_after.status_code == 401
