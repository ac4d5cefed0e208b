from __future__ import annotations

from twilio.rest import Client
from twilio.rest.notify.v1.service import ServiceContext

from .config import Settings, get_settings


def get_twilio_client(settings: Settings | None = None) -> Client:
    settings = settings or get_settings()

    if not settings.twilio_account_sid or not settings.twilio_auth_token:
        raise RuntimeError(
            "Twilio credentials are not configured (TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN)"
        )

    return Client(settings.twilio_account_sid, settings.twilio_auth_token)


def get_notify_service(settings: Settings | None = None) -> ServiceContext:
    """
    Return the Notify service that holds subscriber bindings.

    Bindings and notifications are both created against this service.
    """
    settings = settings or get_settings()
    if not settings.twilio_notify_service_sid:
        raise RuntimeError("TWILIO_NOTIFY_SERVICE_SID is not configured")

    client = get_twilio_client(settings)
    return client.notify.v1.services(settings.twilio_notify_service_sid)
