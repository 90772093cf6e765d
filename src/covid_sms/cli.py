from __future__ import annotations

from .config import get_settings
from .errors import StatsServiceError
from .logging_utils import configure_logging
from .pipeline import handle_message
from .stats import StatsClient
from .twilio_client import PreviewSender

CLI_PHONE = "+999000000_cli"


def chat() -> None:
    """
    Interactive CLI: type a country, see the SMS reply that would be sent.

    Uses the real stats API but never calls Twilio.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    stats = StatsClient.from_settings(settings)

    print("Covid-19 country lookup. Type /quit to exit.\n")
    try:
        while True:
            try:
                user_input = input("country> ").strip()
            except (EOFError, KeyboardInterrupt):
                print()
                break
            if not user_input:
                continue
            if user_input.lower() in {"/q", "/quit", "/exit"}:
                break
            try:
                # fresh sender per turn; nothing accumulates across the session
                result = handle_message(CLI_PHONE, user_input, stats=stats, sender=PreviewSender())
            except StatsServiceError as exc:
                print(f"error> {exc}\n")
                continue
            print(f"bot> {result.reply_text}\n")
    finally:
        stats.close()


def main() -> None:
    chat()


if __name__ == "__main__":
    main()
