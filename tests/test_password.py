from __future__ import annotations

from argon2 import PasswordHasher
from fastapi.testclient import TestClient
from sqlalchemy import select, update

from eventhub.auth.password import hash_password, needs_rehash, verify_password
from eventhub.models import User
from tests.test_auth import login, register


def test_hash_roundtrip():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_verify_handles_garbage_hash():
    assert not verify_password("anything", "not-an-argon2-hash")
    assert not verify_password("", hash_password("x" * 8))


def test_weak_hash_is_upgraded_on_login(client: TestClient, db_session):
    register(client, "legacy@example.com")
    weak = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1).hash("StrongPass123")
    assert needs_rehash(weak)

    db_session.execute(
        update(User).where(User.email == "legacy@example.com").values(password_hash=weak)
    )
    db_session.commit()

    assert login(client, "legacy@example.com").status_code == 200

    db_session.expire_all()
    stored = db_session.scalar(
        select(User.password_hash).where(User.email == "legacy@example.com")
    )
    assert stored != weak
    assert not needs_rehash(stored)
