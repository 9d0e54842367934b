"""Notifier selection for order notifications.

``ORDER_NOTIFIER`` names the adapter: ``fake`` (default) keeps every
notification in memory, ``log`` writes them to the structured log. The
instance is created once per process and shared by every writer thread;
``use_notifier`` installs a specific instance instead.
"""

import os
import threading

from ordering.notifications.port import NotifierPort

_lock = threading.Lock()
_notifier: NotifierPort | None = None


def _build(adapter: str) -> NotifierPort:
    if adapter == "fake":
        from ordering.notifications.fake_adapter import FakeNotifier

        return FakeNotifier()
    if adapter == "log":
        from ordering.notifications.log_adapter import LogNotifier

        return LogNotifier()
    raise ValueError(f"Unknown notifier adapter {adapter!r}, expected 'fake' or 'log'")


def get_notifier() -> NotifierPort:
    global _notifier
    with _lock:
        if _notifier is None:
            _notifier = _build(os.environ.get("ORDER_NOTIFIER", "fake").strip().lower())
        return _notifier


def use_notifier(notifier: NotifierPort | None) -> None:
    global _notifier
    with _lock:
        _notifier = notifier


def reset_notifier() -> None:
    """Forget the current notifier; the next ``get_notifier`` builds a fresh one."""
    use_notifier(None)
