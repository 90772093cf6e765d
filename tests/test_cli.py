from __future__ import annotations

from collections.abc import Iterator

import pytest

from covid_sms import cli
from covid_sms.config import Settings
from covid_sms.errors import StatsTransportError
from covid_sms.stats import CountryStats, StatsErrorReply, StatsResult
from covid_sms.twilio_client import PreviewSender


class FakeStats:
    def __init__(self) -> None:
        self.closed = False

    @classmethod
    def from_settings(cls, settings: Settings) -> FakeStats:
        instance = cls()
        created_stats.append(instance)
        return instance

    def fetch_country(self, country: str) -> StatsResult:
        if country == "offline":
            raise StatsTransportError("connection refused")
        if country == "atlantis":
            return StatsErrorReply(message="Country not found")
        return CountryStats(todayCases=10, recovered=5, deaths=1, cases=100)

    def close(self) -> None:
        self.closed = True


created_stats: list[FakeStats] = []


class RecordingPreviewSender(PreviewSender):
    instances: list[RecordingPreviewSender] = []

    def __init__(self) -> None:
        super().__init__()
        RecordingPreviewSender.instances.append(self)


def feed_input(monkeypatch: pytest.MonkeyPatch, lines: list[str]) -> None:
    it: Iterator[str] = iter(lines)

    def fake_input(prompt: str = "") -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)


@pytest.fixture(autouse=True)
def fakes(monkeypatch: pytest.MonkeyPatch) -> None:
    created_stats.clear()
    RecordingPreviewSender.instances.clear()
    monkeypatch.setattr(cli, "StatsClient", FakeStats)
    monkeypatch.setattr(cli, "PreviewSender", RecordingPreviewSender)
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)


def test_chat_uses_a_fresh_sender_per_turn(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed_input(monkeypatch, ["nigeria", "", "atlantis", "/quit", "never read"])

    cli.chat()

    out = capsys.readouterr().out
    assert "Total Cases: 100" in out
    assert "bot> Country not found" in out
    senders = RecordingPreviewSender.instances
    assert len(senders) == 2
    assert [len(s.sent) for s in senders] == [1, 1]


def test_chat_reports_stats_errors_and_closes_session(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed_input(monkeypatch, ["offline", "nigeria"])

    cli.chat()

    out = capsys.readouterr().out
    assert "error> connection refused" in out
    assert "Total Cases: 100" in out
    assert len(created_stats) == 1
    assert created_stats[0].closed
