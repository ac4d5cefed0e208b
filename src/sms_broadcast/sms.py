from __future__ import annotations

from typing import Final

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_COUNTRY_CODE: Final[str] = "+1"


def normalize_phone(phone: str) -> str:
    """
    Put a sender number into E.164-ish form.

    Numbers that already carry a leading "+" are returned untouched;
    anything else is assumed to be a US number and gets "+1" prepended.
    """
    if phone.startswith("+"):
        return phone
    return f"{DEFAULT_COUNTRY_CODE}{phone}"


class InboundSms(BaseModel):
    model_config = ConfigDict(frozen=True)

    phone: str
    text: str = ""

    @field_validator("phone")
    @classmethod
    def _normalize_phone(cls, value: str) -> str:
        return normalize_phone(value)

    @field_validator("text", mode="before")
    @classmethod
    def _empty_text(cls, value: object) -> object:
        # Twilio omits Body for some MMS-only messages
        return "" if value is None else value
