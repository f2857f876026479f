"""Shared test fixtures for the chairtext package."""

import pytest

from chairtext import BarberContact, MockEmailProvider, NotifierConfig, SMSNotifier, SmtpConfig


class RecordingSleep:
    """Stands in for ``asyncio.sleep`` and records every requested delay."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def notifier_config() -> NotifierConfig:
    return NotifierConfig(
        contact=BarberContact(phone_number="(832) 708-0194", carrier="verizon"),
        from_email="shop@example.com",
        from_name="Test Shop",
        app_name="Test Shop",
    )


@pytest.fixture
def smtp_config() -> SmtpConfig:
    return SmtpConfig(username="shop@example.com", password="app-password")


@pytest.fixture
def mock_provider() -> MockEmailProvider:
    return MockEmailProvider()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def notifier(notifier_config: NotifierConfig, mock_provider: MockEmailProvider, recording_sleep: RecordingSleep) -> SMSNotifier:
    return SMSNotifier(notifier_config, mock_provider, sleep=recording_sleep)
