from __future__ import annotations

import logging
from typing import Any, Final

from twilio.twiml.messaging_response import MessagingResponse

from .commands import (
    BroadcastCommand,
    Command,
    CommandResult,
    HelpCommand,
    ModeratorsCommand,
    SubscribeCommand,
    TestCommand,
)
from .config import Settings
from .sms import InboundSms

logger = logging.getLogger(__name__)

RETRY_MESSAGE: Final[str] = "Oops! Something went wrong. Please try again later."

COMMANDS: Final[dict[str, type[Command]]] = {
    "subscribe": SubscribeCommand,
    "broadcast": BroadcastCommand,
    "send": BroadcastCommand,
    "test": TestCommand,
    "mods": ModeratorsCommand,
}


def command_keyword(text: str) -> str:
    """Lowercased first word of the message body ("" for an empty body)."""
    words = text.split()
    return words[0].lower() if words else ""


def select_command(text: str) -> type[Command]:
    return COMMANDS.get(command_keyword(text), HelpCommand)


async def dispatch(event: InboundSms, settings: Settings, notify: Any) -> CommandResult:
    """Pick the command for this message, run it and return its outcome."""
    command_cls = select_command(event.text)
    logger.info("Running %s for %s", command_cls.__name__, event.phone)
    command = command_cls(event, settings, notify)
    return await command.run()


def reply_text(result: CommandResult) -> str:
    """
    Final text sent back to the sender.

    Any error overrides whatever fallback the command proposed.
    """
    if result.error is not None:
        logger.error("Command failed: %s", result.error, exc_info=result.error)
        return RETRY_MESSAGE
    return result.message


def format_reply(result: CommandResult) -> str:
    """Wrap the reply text in TwiML with a single <Message>."""
    response = MessagingResponse()
    response.message(reply_text(result))
    return str(response)


async def handle_sms(event: InboundSms, settings: Settings, notify: Any) -> str:
    """Inbound SMS in, TwiML reply out."""
    result = await dispatch(event, settings, notify)
    return format_reply(result)
