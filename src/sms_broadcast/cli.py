from __future__ import annotations

import argparse
import asyncio

from .config import get_settings
from .dispatch import dispatch, reply_text
from .sms import InboundSms
from .twilio_client import get_notify_service

CLI_PHONE = "+15550000000"


def chat(phone: str) -> None:
    """
    Interactive console that feeds each line through the dispatcher.

    Commands hit the real Notify service configured in the environment,
    so "broadcast" from an admin number really does text subscribers.
    """
    settings = get_settings()
    notify = get_notify_service(settings)
    print(f"sms-broadcast console as {phone}. Type /quit to exit.\n")
    while True:
        try:
            user_input = input("sms> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not user_input:
            continue
        if user_input.lower() in {"/q", "/quit", "/exit"}:
            break
        event = InboundSms(phone=phone, text=user_input)
        result = asyncio.run(dispatch(event, settings, notify))
        print(f"reply> {reply_text(result)}\n")


def main() -> None:
    parser = argparse.ArgumentParser(description="Send commands to sms-broadcast locally.")
    parser.add_argument(
        "--phone",
        type=str,
        default=CLI_PHONE,
        help=f"Sender number to use (default: {CLI_PHONE}).",
    )
    args = parser.parse_args()
    chat(args.phone)


if __name__ == "__main__":
    main()
