"""Workout session and catalog services."""

from .background import BackgroundTasks
from .calendar import CalendarAccessError, CalendarEvent, CalendarService, LocalCalendarService
from .catalog import WorkoutCatalog
from .location import FixedLocationService, LocationService
from .notifications import ConsoleNotificationScheduler, RestNotificationScheduler
from .session import ActiveWorkoutSession, RestState, RestTimer, SessionState

__all__ = [
    "ActiveWorkoutSession",
    "BackgroundTasks",
    "CalendarAccessError",
    "CalendarEvent",
    "CalendarService",
    "ConsoleNotificationScheduler",
    "FixedLocationService",
    "LocalCalendarService",
    "LocationService",
    "RestNotificationScheduler",
    "RestState",
    "RestTimer",
    "SessionState",
    "WorkoutCatalog",
]
