"""Notification payload and styler contract for sale alerts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class NotificationMessage:
    """One alert for the notifiers; event_type selects how it is rendered.

    For ``sale_detected`` the payload holds ``{"sale": SaleRecord.to_dict()}``.
    """

    event_type: str
    message: str
    title: str | None = None
    payload: dict[str, Any] | None = None


class NotificationStyler(Protocol):
    def render(self, message: NotificationMessage) -> str:
        """Return the plain-text body a notifier prints or sends."""
        ...
