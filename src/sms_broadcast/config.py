from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel


def parse_admin_numbers(raw: str | None) -> tuple[str, ...]:
    """Split the comma separated ADMIN_NUMBERS value, keeping order."""
    if not raw:
        return ()
    return tuple(n.strip() for n in raw.split(",") if n.strip())


class Settings(BaseModel):
    # --- Twilio account + Notify service ---
    twilio_account_sid: str | None = os.getenv("TWILIO_ACCOUNT_SID")
    twilio_auth_token: str | None = os.getenv("TWILIO_AUTH_TOKEN")
    twilio_notify_service_sid: str | None = os.getenv("TWILIO_NOTIFY_SERVICE_SID")

    # Raw comma separated list, e.g. "+15551111111,+15552222222"
    admin_numbers_raw: str = os.getenv("ADMIN_NUMBERS", "")
    admin_numbers: tuple[str, ...] = ()

    # Shown in help / fallback messages
    owner_name: str = os.getenv("OWNER_NAME", "the organizer")
    owner_number: str = os.getenv("OWNER_NUMBER", "")

    # Optional X-Twilio-Signature check on the webhook
    validate_signature: bool = os.getenv("TWILIO_VALIDATE_SIGNATURE", "").lower() in {
        "1",
        "true",
        "yes",
    }
    # URL Twilio is configured to call; needed when the app sits behind a proxy.
    public_webhook_url: str | None = os.getenv("PUBLIC_WEBHOOK_URL")

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def model_post_init(self, __context: object) -> None:  # type: ignore[override]
        if not self.admin_numbers and self.admin_numbers_raw:
            object.__setattr__(
                self, "admin_numbers", parse_admin_numbers(self.admin_numbers_raw)
            )

    def is_admin(self, phone: str) -> bool:
        return phone in self.admin_numbers


@lru_cache
def get_settings() -> Settings:
    return Settings()
