from __future__ import annotations

import asyncio
import base64
import logging
import threading

import pytest

from user_directory.application.services.auth_service import AuthOutcome, AuthService


def _basic(identifier: str, secret: str) -> str:
    raw = f"{identifier}:{secret}".encode()
    return "Basic " + base64.b64encode(raw).decode("ascii")


class FakeUserRepository:
    def __init__(self, hashes: dict[str, str | None]) -> None:
        self.hashes = hashes
        self.lookups: list[str] = []

    async def get_password_hash_by_email(self, *, email: str) -> str | None:
        self.lookups.append(email)
        return self.hashes.get(email)


class FakePasswordHasher:
    def __init__(self) -> None:
        self.hash_calls: list[str] = []
        self.verify_calls: list[tuple[str, str]] = []

    def hash_password(self, password: str) -> str:
        self.hash_calls.append(password)
        return f"hashed::{password}"

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        self.verify_calls.append((password, password_hash))
        return password_hash == f"hashed::{password}"


def _service(
    hashes: dict[str, str | None],
) -> tuple[AuthService, FakeUserRepository, FakePasswordHasher]:
    users = FakeUserRepository(hashes)
    hasher = FakePasswordHasher()
    return AuthService(users=users, password_hasher=hasher), users, hasher


@pytest.mark.asyncio
async def test_authenticate_success_returns_identifier() -> None:
    service, users, hasher = _service({"bob@x.com": "hashed::hunter2"})

    result = await service.authenticate(authorization_header=_basic("bob@x.com", "hunter2"))

    assert result.outcome is AuthOutcome.AUTHENTICATED
    assert result.identifier == "bob@x.com"
    assert users.lookups == ["bob@x.com"]
    assert hasher.verify_calls == [("hunter2", "hashed::hunter2")]


@pytest.mark.asyncio
async def test_authenticate_wrong_password_is_invalid_credentials() -> None:
    service, _, hasher = _service({"bob@x.com": "hashed::hunter2"})

    result = await service.authenticate(authorization_header=_basic("bob@x.com", "wrong"))

    assert result.outcome is AuthOutcome.INVALID_CREDENTIALS
    assert result.identifier is None
    assert hasher.verify_calls == [("wrong", "hashed::hunter2")]


@pytest.mark.asyncio
async def test_authenticate_unknown_identifier_runs_decoy_verification() -> None:
    service, users, hasher = _service({})

    result = await service.authenticate(authorization_header=_basic("nobody@x.com", "pw"))

    assert result.outcome is AuthOutcome.INVALID_CREDENTIALS
    assert result.identifier is None
    assert users.lookups == ["nobody@x.com"]
    assert len(hasher.hash_calls) == 1
    assert len(hasher.verify_calls) == 1
    assert hasher.verify_calls[0][0] == "pw"


@pytest.mark.asyncio
async def test_decoy_hash_is_created_once() -> None:
    service, _, hasher = _service({"no-credential@x.com": None})

    await service.authenticate(authorization_header=_basic("nobody@x.com", "pw"))
    result = await service.authenticate(authorization_header=_basic("no-credential@x.com", "pw"))

    assert result.outcome is AuthOutcome.INVALID_CREDENTIALS
    assert len(hasher.hash_calls) == 1
    assert len(hasher.verify_calls) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "header",
    [None, "Bearer xyz", "Basic " + base64.b64encode(b"nocolon").decode("ascii")],
)
async def test_malformed_header_skips_lookup(header: str | None) -> None:
    service, users, hasher = _service({"bob@x.com": "hashed::hunter2"})

    result = await service.authenticate(authorization_header=header)

    assert result.outcome is AuthOutcome.MALFORMED_REQUEST
    assert result.identifier is None
    assert users.lookups == []
    assert hasher.verify_calls == []


@pytest.mark.asyncio
async def test_audit_log_records_identifier_and_outcome_only(
    caplog: pytest.LogCaptureFixture,
) -> None:
    service, _, _ = _service({"bob@x.com": "hashed::hunter2"})

    with caplog.at_level(logging.INFO, logger="user_directory.application.services.auth_service"):
        await service.authenticate(authorization_header=_basic("bob@x.com", "hunter2"))
        await service.authenticate(authorization_header=_basic("bob@x.com", "wrong-secret"))

    messages = [record.getMessage() for record in caplog.records]
    assert messages == [
        "auth_basic_attempt identifier='bob@x.com' outcome=authenticated",
        "auth_basic_attempt identifier='bob@x.com' outcome=invalid_credentials",
    ]
    assert all("hunter2" not in message for message in messages)
    assert all("wrong-secret" not in message for message in messages)


@pytest.mark.asyncio
async def test_control_characters_in_identifier_cannot_forge_log_lines(
    caplog: pytest.LogCaptureFixture,
) -> None:
    service, _, _ = _service({})
    forged = "eve@x.com\nauth_basic_attempt identifier=admin@x.com outcome=authenticated"

    with caplog.at_level(logging.INFO, logger="user_directory.application.services.auth_service"):
        await service.authenticate(authorization_header=_basic(forged, "pw"))

    messages = [record.getMessage() for record in caplog.records]
    assert len(messages) == 1
    assert "\n" not in messages[0]
    assert messages[0].endswith("outcome=invalid_credentials")


class BarrierPasswordHasher(FakePasswordHasher):
    """Verification only completes once two verifications run at the same time."""

    def __init__(self) -> None:
        super().__init__()
        self.barrier = threading.Barrier(2, timeout=5)

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        self.barrier.wait()
        return super().verify_password(password=password, password_hash=password_hash)


@pytest.mark.asyncio
async def test_concurrent_authentications_verify_in_parallel() -> None:
    users = FakeUserRepository({"bob@x.com": "hashed::hunter2", "amy@x.com": "hashed::pw"})
    hasher = BarrierPasswordHasher()
    service = AuthService(users=users, password_hasher=hasher)

    results = await asyncio.gather(
        service.authenticate(authorization_header=_basic("bob@x.com", "hunter2")),
        service.authenticate(authorization_header=_basic("amy@x.com", "pw")),
    )

    assert [result.outcome for result in results] == [
        AuthOutcome.AUTHENTICATED,
        AuthOutcome.AUTHENTICATED,
    ]
    assert hasher.barrier.broken is False
