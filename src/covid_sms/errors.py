from __future__ import annotations


class CovidSmsError(Exception):
    """Base class for failures the webhook layer maps to an HTTP status."""


class StatsServiceError(CovidSmsError):
    pass


class StatsTransportError(StatsServiceError):
    """The stats API could not be reached (DNS, connection, timeout...)."""


class StatsDecodeError(StatsServiceError):
    """The stats API answered with something that is neither known shape."""


class MessagingError(CovidSmsError):
    pass


class MessagingConfigError(MessagingError):
    """Twilio credentials or sender number are missing."""


class MessagingSendError(MessagingError):
    """Twilio refused or failed to create the message."""
