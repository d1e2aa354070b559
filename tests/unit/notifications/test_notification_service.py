# -*- coding: utf-8 -*-
"""Unit tests for NotificationService and ConsoleNotifier."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from nft_sales_tracker.notifications import (
    BaseNotificationStrategy,
    ConsoleNotifier,
    NotificationMessage,
    NotificationService,
)


class _Recorder(BaseNotificationStrategy):
    def __init__(self, *, fail: bool = False) -> None:
        super().__init__(SimpleNamespace())
        self.sent: list[NotificationMessage] = []
        self._fail = fail
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        self._running = True

    async def shutdown(self) -> None:
        self._running = False

    async def send_notification(self, message: NotificationMessage) -> None:
        if self._fail:
            raise RuntimeError("channel down")
        self.sent.append(message)


async def test_messages_are_delivered_to_all_notifiers_on_shutdown() -> None:
    broken, ok = _Recorder(fail=True), _Recorder()
    service = NotificationService(notifiers=[broken, ok])
    await service.initialize()

    assert service.notify(NotificationMessage(event_type="e", message="one")) is True
    await service.shutdown()

    assert [m.message for m in ok.sent] == ["one"]
    assert ok.is_running is False


async def test_notify_without_notifiers_is_noop() -> None:
    service = NotificationService(notifiers=[])
    await service.initialize()
    assert service.notify(NotificationMessage(event_type="e", message="x")) is False
    await service.shutdown()


def test_notify_before_initialize_raises() -> None:
    service = NotificationService(notifiers=[_Recorder()])
    with pytest.raises(RuntimeError):
        service.notify(NotificationMessage(event_type="e", message="x"))


async def test_full_queue_drops_message() -> None:
    service = NotificationService(notifiers=[_Recorder()], queue_size=1)
    await service.initialize()
    service.notify(NotificationMessage(event_type="e", message="1"))
    assert service.notify(NotificationMessage(event_type="e", message="2")) is False
    await service.shutdown()


async def test_console_notifier_prints_rendered_message(
    capsys: pytest.CaptureFixture[str], settings: Any
) -> None:
    styler = SimpleNamespace(render=lambda message: f"rendered:{message.message}")
    notifier = ConsoleNotifier(settings, styler)
    await notifier.initialize()
    await notifier.send_notification(NotificationMessage(event_type="e", message="hi"))
    assert capsys.readouterr().out.strip() == "rendered:hi"


async def test_console_notifier_respects_disabled_setting(
    capsys: pytest.CaptureFixture[str], settings_factory: Any
) -> None:
    notifier = ConsoleNotifier(settings_factory(console={"enabled": False}))
    await notifier.initialize()
    await notifier.send_notification(NotificationMessage(event_type="e", message="hi"))
    assert capsys.readouterr().out == ""
