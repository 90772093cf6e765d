from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import Depends, FastAPI, Form, Request, Response
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .errors import MessagingConfigError, MessagingError, StatsServiceError
from .logging_utils import configure_logging
from .pipeline import handle_message
from .sms import InboundSms
from .stats import StatsClient
from .twilio_client import PreviewSender, SmsSender, TwilioSender

logger = logging.getLogger(__name__)

EMPTY_TWIML = """<?xml version="1.0" encoding="UTF-8"?>
<Response></Response>"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: runs once before the app starts serving requests
    configure_logging(get_settings().log_level)
    yield
    # Shutdown: close the pooled stats session(s)
    close_shared_clients()


app = FastAPI(title="covid-sms", version="0.1.0", lifespan=lifespan)


# --- Shared clients (one per process and Settings value) ---

_stats_clients: dict[Settings, StatsClient] = {}
_stats_clients_lock = threading.Lock()


def shared_stats_client(settings: Settings) -> StatsClient:
    with _stats_clients_lock:
        client = _stats_clients.get(settings)
        if client is None:
            client = _stats_clients[settings] = StatsClient.from_settings(settings)
        return client


@lru_cache
def shared_sender(settings: Settings) -> TwilioSender:
    return TwilioSender(settings)


def close_shared_clients() -> None:
    with _stats_clients_lock:
        for client in _stats_clients.values():
            client.close()
        _stats_clients.clear()
    shared_sender.cache_clear()


# --- Dependencies ---


def get_stats_client(settings: Settings = Depends(get_settings)) -> StatsClient:
    return shared_stats_client(settings)


def get_sender(settings: Settings = Depends(get_settings)) -> SmsSender:
    return shared_sender(settings)


# --- Error mapping ---


@app.exception_handler(StatsServiceError)
async def stats_error_handler(request: Request, exc: StatsServiceError) -> JSONResponse:
    logger.error("stats lookup failed: %s", exc, exc_info=exc)
    return JSONResponse({"detail": "Stats service unavailable"}, status_code=502)


@app.exception_handler(MessagingError)
async def messaging_error_handler(request: Request, exc: MessagingError) -> JSONResponse:
    if isinstance(exc, MessagingConfigError):
        logger.error("messaging misconfigured: %s", exc, exc_info=exc)
        return JSONResponse({"detail": "Messaging not configured"}, status_code=500)
    logger.error("sms send failed: %s", exc, exc_info=exc)
    return JSONResponse({"detail": "Messaging service failed"}, status_code=502)


# --- Routes ---


@app.get("/health")
def health() -> JSONResponse:
    return JSONResponse({"status": "ok"})


@app.post("/sms/inbound")
def sms_inbound(
    From_: str = Form(..., alias="From"),
    Body: str = Form("", alias="Body"),
    stats: StatsClient = Depends(get_stats_client),
    sender: SmsSender = Depends(get_sender),
) -> Response:
    """
    Twilio-style SMS webhook endpoint.

    Behaviour:
      - look up the country named in Body
      - send the summary (or the API's error text) back to From via Twilio
      - return empty TwiML so Twilio does NOT send an auto-reply
    """
    handle_message(From_, Body, stats=stats, sender=sender)
    return Response(content=EMPTY_TWIML, media_type="application/xml")


@app.post("/test/inbound")
def test_inbound(payload: InboundSms, stats: StatsClient = Depends(get_stats_client)) -> JSONResponse:
    """
    Preview endpoint: same lookup and formatting, but nothing is sent.

    Accepts JSON:

      { "phone": "+2348012345678", "text": "nigeria" }
    """
    result = handle_message(payload.phone, payload.text, stats=stats, sender=PreviewSender())
    return JSONResponse({"status": "ok", "kind": result.kind, "reply": result.reply_text})
