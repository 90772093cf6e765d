from __future__ import annotations

from pydantic import BaseModel


class InboundSms(BaseModel):
    phone: str
    text: str = ""


class OutboundSms(BaseModel):
    recipient: str
    body: str
