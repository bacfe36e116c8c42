"""Auto-scheduling configuration parsed from a campaign's JSON column."""

import logging
from datetime import time
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from core.utils.datetime import parse_clock_time

logger = logging.getLogger(__name__)

# Stored campaign JSON uses the web client's camelCase keys
_STORED_KEYS = {
    "enabled": "enabled",
    "scoreThreshold": "score_threshold",
    "schedulingDelay": "scheduling_delay_hours",
    "intervalBetweenRounds": "interval_between_rounds_hours",
    "defaultStartTime": "default_start_time",
    "timezone": "timezone",
    "autoEmailNotification": "email_notification",
}

# Older campaign rows saved the flag without the "auto" prefix
_KEY_ALIASES = {"emailNotification": "email_notification"}


class AutoScheduleConfig(BaseModel):
    """Per-campaign auto-scheduling settings. Read-only to the engine."""

    enabled: bool = True
    score_threshold: float = Field(default=80, ge=0, le=100)
    scheduling_delay_hours: float = Field(default=24, ge=0, le=168)
    interval_between_rounds_hours: float = Field(default=24, ge=1, le=168)
    default_start_time: str = "10:00"
    timezone: str = "UTC"
    email_notification: bool = True

    @field_validator("default_start_time")
    @classmethod
    def validate_start_time(cls, v: str) -> str:
        if parse_clock_time(v) is None:
            raise ValueError("default_start_time must be HH:MM in 24-hour format")
        return v.strip()

    @property
    def start_clock_time(self) -> time:
        return parse_clock_time(self.default_start_time)

    def to_stored(self) -> dict[str, Any]:
        """Serialize back to the stored camelCase shape."""
        return {stored: getattr(self, attr) for stored, attr in _STORED_KEYS.items()}

    @classmethod
    def defaults_from_settings(cls, settings: Any) -> "AutoScheduleConfig":
        return cls(
            enabled=settings.default_auto_schedule_enabled,
            score_threshold=settings.default_score_threshold,
            scheduling_delay_hours=settings.default_scheduling_delay_hours,
            interval_between_rounds_hours=settings.default_interval_between_rounds_hours,
            default_start_time=settings.default_start_time,
            timezone=settings.default_timezone,
            email_notification=settings.default_email_notification,
        )


def parse_auto_schedule_config(
    raw: Optional[dict[str, Any]],
    defaults: AutoScheduleConfig,
) -> AutoScheduleConfig:
    """
    Build a config from stored JSON, falling back to defaults.

    Missing keys take their default one by one. A value that fails
    validation is dropped with a warning and replaced by its default, so
    one bad field never disables the rest of the configuration.

    Args:
        raw: Stored JSON (camelCase or snake_case keys), or None
        defaults: Values used for anything missing or invalid

    Returns:
        A fully populated AutoScheduleConfig
    """
    if raw is None:
        return defaults
    if not isinstance(raw, dict):
        logger.warning(f"Ignoring malformed auto-schedule config of type {type(raw).__name__}")
        return defaults

    values = defaults.model_dump()
    for key, value in raw.items():
        attr = _STORED_KEYS.get(key) or _KEY_ALIASES.get(key, key)
        if attr not in values:
            continue
        candidate = {**values, attr: value}
        try:
            AutoScheduleConfig.model_validate(candidate)
        except ValidationError:
            logger.warning(f"Invalid auto-schedule value for '{key}': {value!r}, using default")
            continue
        values[attr] = value

    return AutoScheduleConfig.model_validate(values)
