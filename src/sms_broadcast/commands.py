from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Final

from fastapi.concurrency import run_in_threadpool

from .config import Settings
from .sms import InboundSms
from .twilio_client import get_notify_service

logger = logging.getLogger(__name__)

BROADCAST_TAG: Final[str] = "all"
BINDING_TYPE: Final[str] = "sms"

NOT_IMPLEMENTED_MESSAGE: Final[str] = "Sorry, that command is not implemented yet."
NOT_AUTHORIZED_MESSAGE: Final[str] = (
    "Your phone number is not authorized to broadcast in this application."
)
SUBSCRIBE_SUCCESS_MESSAGE: Final[str] = (
    "Thanks! You're now subscribed and will receive updates by text."
)
BROADCAST_SUCCESS_MESSAGE: Final[str] = "Boom! Message broadcast to all subscribers."
BROADCAST_FAILURE_MESSAGE: Final[str] = "Failed to send the message. Please try again."


@dataclass
class CommandResult:
    message: str
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Command:
    """
    One inbound SMS, interpreted as "<keyword> <arguments...>".

    Subclasses override `run` to perform their (at most one) Notify call.
    """

    def __init__(self, event: InboundSms, settings: Settings, notify: Any = None) -> None:
        self.event = event
        self.settings = settings
        self.notify = notify
        self.from_number = event.phone
        self.body = event.text or ""

    @cached_property
    def arguments(self) -> list[str]:
        # keyword ends at the first whitespace of any kind, e.g. "send\nhi"
        rest = self.body.split(maxsplit=1)[1:]
        if not rest:
            return []
        return rest[0].strip().split(" ")

    @cached_property
    def text(self) -> str:
        return " ".join(self.arguments)

    def service(self) -> Any:
        """Notify service handle, built from settings if none was passed in."""
        if self.notify is None:
            self.notify = get_notify_service(self.settings)
        return self.notify

    async def run(self) -> CommandResult:
        return CommandResult(message=NOT_IMPLEMENTED_MESSAGE)


class HelpCommand(Command):
    async def run(self) -> CommandResult:
        return CommandResult(message=help_message(self.settings))


class SubscribeCommand(Command):
    async def run(self) -> CommandResult:
        try:
            await run_in_threadpool(
                self.service().bindings.create,
                identity=self.from_number,
                binding_type=BINDING_TYPE,
                address=self.from_number,
            )
        except Exception as exc:
            return CommandResult(message=subscribe_failure_message(self.settings), error=exc)
        return CommandResult(message=SUBSCRIBE_SUCCESS_MESSAGE)


class AdminCommand(Command):
    """
    Base for commands only numbers in ADMIN_NUMBERS may use.

    Unauthorized senders get NOT_AUTHORIZED_MESSAGE and no Notify call is made.
    """

    async def run(self) -> CommandResult:
        if not self.settings.is_admin(self.from_number):
            logger.info("Rejected %s from non-admin %s", type(self).__name__, self.from_number)
            return CommandResult(message=NOT_AUTHORIZED_MESSAGE)

        try:
            await run_in_threadpool(self.service().notifications.create, **self.notification())
        except Exception as exc:
            logger.warning("%s failed to create notification: %s", type(self).__name__, exc)
            return CommandResult(message=BROADCAST_FAILURE_MESSAGE, error=exc)
        return CommandResult(message=self.success_message())

    def notification(self) -> dict[str, Any]:
        """Keyword arguments for notifications.create()."""
        raise NotImplementedError

    def success_message(self) -> str:
        raise NotImplementedError


class BroadcastCommand(AdminCommand):
    def notification(self) -> dict[str, Any]:
        return {"tag": [BROADCAST_TAG], "body": self.text}

    def success_message(self) -> str:
        return BROADCAST_SUCCESS_MESSAGE


class TestCommand(AdminCommand):
    # Not a pytest test class
    __test__ = False

    def notification(self) -> dict[str, Any]:
        return {"identity": [self.from_number], "body": self.text}

    def success_message(self) -> str:
        return f"Sent a test message to {self.from_number}."


class ModeratorsCommand(AdminCommand):
    def notification(self) -> dict[str, Any]:
        return {"to_binding": moderator_bindings(self.settings.admin_numbers), "body": self.text}

    def success_message(self) -> str:
        return f"Sent message to moderators: {', '.join(self.settings.admin_numbers)}"


def moderator_bindings(numbers: tuple[str, ...] | list[str]) -> list[str]:
    """
    One SMS binding descriptor per admin number, in list order.

    Notify's ToBinding parameter takes each binding as a JSON string.
    """
    return [json.dumps({"binding_type": BINDING_TYPE, "address": n}) for n in numbers]


def help_message(settings: Settings) -> str:
    contact = f" at {settings.owner_number}" if settings.owner_number else ""
    return (
        f"Text SUBSCRIBE to get updates from {settings.owner_name}. "
        f"Questions? Contact {settings.owner_name}{contact}."
    )


def subscribe_failure_message(settings: Settings) -> str:
    contact = f" at {settings.owner_number}" if settings.owner_number else ""
    return (
        "Something went wrong while subscribing you. "
        f"Please contact {settings.owner_name}{contact}."
    )
