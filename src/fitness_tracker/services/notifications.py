"""Rest notification scheduling."""

import logging
import threading
from datetime import datetime
from typing import Protocol, runtime_checkable

import click

logger = logging.getLogger(__name__)


@runtime_checkable
class RestNotificationScheduler(Protocol):
    """Schedules the "rest finished" reminder.

    Both calls are fire-and-forget: they return immediately and their
    outcome is never reported back to the caller.
    """

    def request_authorization_if_needed(self) -> None:
        ...

    def schedule_rest_notification(self, ends_at: datetime, title: str, body: str) -> None:
        ...


class ConsoleNotificationScheduler:
    """Prints rest reminders to the terminal when they come due.

    Scheduled reminders cannot be withdrawn; a reminder for a cancelled rest
    period still prints.
    """

    def __init__(self, minimum_delay: float = 1.0):
        self.minimum_delay = minimum_delay
        self.authorized = False

    def request_authorization_if_needed(self) -> None:
        if self.authorized:
            return
        self.authorized = True
        logger.debug("Console notifications enabled")

    def schedule_rest_notification(self, ends_at: datetime, title: str, body: str) -> None:
        delay = max(self.minimum_delay, (ends_at - datetime.now()).total_seconds())
        timer = threading.Timer(delay, self._deliver, args=(title, body))
        timer.daemon = True
        timer.start()
        logger.debug("Scheduled %r in %.0fs", title, delay)

    def _deliver(self, title: str, body: str) -> None:
        click.echo()
        click.echo(click.style(f"[{title}] ", fg="magenta", bold=True) + body)
