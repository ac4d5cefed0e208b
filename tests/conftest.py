from __future__ import annotations

from typing import Any

import pytest

from sms_broadcast.config import Settings

ADMIN = "+15551234567"


class FakeResource:
    """Records create() calls; raises `error` instead when it is set."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.error: Exception | None = None

    def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return type("Instance", (), {"sid": "XX123"})()


class FakeNotify:
    """Stands in for client.notify.v1.services(sid)."""

    def __init__(self) -> None:
        self.bindings = FakeResource()
        self.notifications = FakeResource()

    @property
    def call_count(self) -> int:
        return len(self.bindings.calls) + len(self.notifications.calls)


@pytest.fixture
def notify() -> FakeNotify:
    return FakeNotify()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        twilio_account_sid="AC123",
        twilio_auth_token="secret",
        twilio_notify_service_sid="IS123",
        admin_numbers_raw=ADMIN,
        owner_name="Ada",
        owner_number="+15550001111",
        validate_signature=False,
    )
