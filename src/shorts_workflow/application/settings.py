"""
Settings validation – coerce the untrusted request payload into typed Settings.
Every invalid field is reported, not just the first one.
"""

from typing import Any, Dict, Mapping, Optional, Tuple

from shorts_workflow import config
from shorts_workflow.domain.errors import InvalidSettings
from shorts_workflow.domain.models import Settings

# wire name -> internal name
_FIELD_ALIASES = {
    "storyCount": "story_count",
    "voiceProfile": "voice_profile",
    "includeBroll": "include_broll",
}

_TRUE_WORDS = ("true", "1", "yes", "on")
_FALSE_WORDS = ("false", "0", "no", "off", "")


def _lookup(raw: Mapping[str, Any], name: str) -> Any:
    if name in raw:
        return raw[name]
    for wire, internal in _FIELD_ALIASES.items():
        if internal == name and wire in raw:
            return raw[wire]
    return None


def _coerce_int(value: Any) -> Optional[int]:
    """Integer-valued numbers and numeric strings; None when not an integer."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return int(number) if number.is_integer() else None
    return None


def _coerce_bool(value: Any) -> Optional[bool]:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if value in (0, 1):
            return bool(value)
        return None
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return None


def _normalize_subreddit(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    name = value.strip()
    for prefix in ("/r/", "r/"):
        if name.lower().startswith(prefix):
            name = name[len(prefix):]
            break
    return name.strip().strip("/")


def collect_settings_errors(raw: Mapping[str, Any]) -> Tuple[Optional[Settings], Dict[str, str]]:
    """
    Validate a raw settings mapping.

    Returns (settings, {}) when valid, (None, field_errors) otherwise.
    Accepts both the camelCase wire keys and the snake_case field names.
    """
    if not isinstance(raw, Mapping):
        return None, {"settings": "expected an object"}

    errors: Dict[str, str] = {}

    subreddit = _normalize_subreddit(_lookup(raw, "subreddit"))
    if not subreddit:
        errors["subreddit"] = "required, must be a non-empty string"

    timeframe = _lookup(raw, "timeframe")
    if isinstance(timeframe, str):
        timeframe = timeframe.strip().lower()
    if timeframe not in config.TIMEFRAMES:
        errors["timeframe"] = f"must be one of {', '.join(config.TIMEFRAMES)}"

    story_count = _coerce_int(_lookup(raw, "story_count"))
    if story_count is None:
        errors["storyCount"] = "must be an integer"
    elif not config.STORY_COUNT_MIN <= story_count <= config.STORY_COUNT_MAX:
        errors["storyCount"] = f"must be between {config.STORY_COUNT_MIN} and {config.STORY_COUNT_MAX}"

    duration = _coerce_int(_lookup(raw, "duration"))
    if duration is None:
        errors["duration"] = "must be an integer number of seconds"
    elif not config.DURATION_MIN <= duration <= config.DURATION_MAX:
        errors["duration"] = f"must be between {config.DURATION_MIN} and {config.DURATION_MAX} seconds"

    voice_profile = _lookup(raw, "voice_profile")
    if isinstance(voice_profile, str):
        voice_profile = voice_profile.strip().lower()
    if voice_profile not in config.VOICE_PROFILES:
        errors["voiceProfile"] = f"must be one of {', '.join(config.VOICE_PROFILES)}"

    include_broll = _coerce_bool(_lookup(raw, "include_broll"))
    if include_broll is None:
        errors["includeBroll"] = "must be a boolean"

    if errors:
        return None, errors

    return Settings(
        subreddit=subreddit,
        timeframe=timeframe,
        story_count=story_count,
        duration=duration,
        voice_profile=voice_profile,
        include_broll=include_broll,
    ), {}


def validate_settings(raw: Mapping[str, Any]) -> Settings:
    """Return typed Settings or raise InvalidSettings with every field error."""
    settings, errors = collect_settings_errors(raw)
    if errors:
        raise InvalidSettings(errors)
    return settings
