from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from .formatting import format_summary
from .logging_utils import mask_phone, shorten_body
from .sms import OutboundSms
from .stats import StatsClient, StatsErrorReply
from .twilio_client import SmsSender

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    reply_text: str
    recipient: str
    kind: Literal["error", "summary"]
    message_sid: str | None = None


def handle_message(
    from_number: str,
    body: str,
    *,
    stats: StatsClient,
    sender: SmsSender,
    now: datetime | None = None,
) -> PipelineResult:
    """
    Core business logic for one inbound SMS:
    - look the body up as a country on the stats API
    - if the API reports an error, reply with its message verbatim
    - otherwise reply with the formatted case summary
    - send exactly one SMS back to the sender

    Stats and messaging failures are raised to the caller untouched.
    """
    logger.info("inbound sms from=%s body=%r", mask_phone(from_number), shorten_body(body))

    # 1. Look up the country (no validation of the body)
    result = stats.fetch_country(body)

    # 2. Pick the reply
    if isinstance(result, StatsErrorReply):
        kind: Literal["error", "summary"] = "error"
        reply_text = result.message
    else:
        kind = "summary"
        reply_text = format_summary(body, result, now=now)

    # 3. Send it
    sid = sender.send(OutboundSms(recipient=from_number, body=reply_text))
    return PipelineResult(reply_text=reply_text, recipient=from_number, kind=kind, message_sid=sid)
