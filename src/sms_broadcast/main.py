from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Form, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from twilio.request_validator import RequestValidator

from .config import Settings, get_settings
from .dispatch import dispatch, handle_sms, reply_text
from .sms import InboundSms
from .twilio_client import get_notify_service

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(
        "Starting sms-broadcast: %d admin number(s), notify service %s",
        len(settings.admin_numbers),
        settings.twilio_notify_service_sid or "<not configured>",
    )
    # One Twilio client for the process. When Notify is not configured, commands
    # that need it fail per request and the sender gets the retry reply.
    try:
        app.state.notify = get_notify_service(settings)
    except RuntimeError as exc:
        logger.warning("Notify service unavailable: %s", exc)
        app.state.notify = None
    yield


app = FastAPI(title="sms-broadcast", version="0.1.0", lifespan=lifespan)


# --- Dependencies ---


def get_notify(request: Request) -> Any:
    return getattr(request.app.state, "notify", None)


async def verify_twilio_signature(
    request: Request, settings: Settings = Depends(get_settings)
) -> None:
    """
    Reject webhook calls that were not signed by Twilio.

    Only enforced when TWILIO_VALIDATE_SIGNATURE is set.
    """
    if not settings.validate_signature:
        return

    if not settings.twilio_auth_token:
        raise HTTPException(status_code=500, detail="TWILIO_AUTH_TOKEN not configured")

    url = settings.public_webhook_url or str(request.url)
    form = await request.form()
    signature = request.headers.get("X-Twilio-Signature", "")
    validator = RequestValidator(settings.twilio_auth_token)
    if not validator.validate(url, dict(form), signature):
        raise HTTPException(status_code=403, detail="Invalid Twilio signature")


# --- Routes ---


class TestInbound(BaseModel):
    phone: str
    text: str = ""


@app.get("/health")
def health() -> JSONResponse:
    return JSONResponse({"status": "ok"})


@app.post("/sms/inbound", dependencies=[Depends(verify_twilio_signature)])
async def sms_inbound(
    From_: str = Form(..., alias="From"),
    Body: str = Form("", alias="Body"),
    settings: Settings = Depends(get_settings),
    notify: Any = Depends(get_notify),
) -> Response:
    """
    Twilio SMS webhook endpoint.

    Parses the command keyword from Body, runs it and replies with TwiML
    containing a single <Message>.
    """
    event = InboundSms(phone=From_, text=Body)
    twiml = await handle_sms(event, settings, notify)
    return Response(content=twiml, media_type="application/xml")


@app.post("/test/inbound")
async def test_inbound(
    payload: TestInbound,
    settings: Settings = Depends(get_settings),
    notify: Any = Depends(get_notify),
) -> JSONResponse:
    """
    Local testing endpoint, no TwiML.

    Accepts JSON:

      { "phone": "+15551234567", "text": "subscribe" }
    """
    event = InboundSms(phone=payload.phone, text=payload.text)
    result = await dispatch(event, settings, notify)
    return JSONResponse({"status": "ok", "reply": reply_text(result)})
