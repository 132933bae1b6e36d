"""CLI commands for fitness-tracker."""

from .exercises import exercises
from .export import export, import_data
from .init import init
from .locations import locations
from .plans import plans
from .stats import stats
from .workout import workout

__all__ = [
    "exercises",
    "export",
    "import_data",
    "init",
    "locations",
    "plans",
    "stats",
    "workout",
]
