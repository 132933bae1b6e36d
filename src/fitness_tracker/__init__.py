"""fitness-tracker: workout logging with live sessions and rest timers."""
