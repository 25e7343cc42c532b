"""structlog processors applied before rendering.

Delivery logs carry phone numbers, email addresses and vendor credentials.
Credentials are replaced outright. Destinations keep their last few
characters so two recipients can still be told apart in a log search.
Message bodies can be long; string values are capped.
"""

from typing import Any, Callable, Dict, FrozenSet, Optional

EventDict = Dict[str, Any]
Processor = Callable[[Any, str, EventDict], EventDict]

REDACTED = "***REDACTED***"

# Any key containing one of these is redacted
SENSITIVE_PATTERNS: FrozenSet[str] = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "authorization",
        "auth",
        "credential",
        "private_key",
        "account_sid",
    }
)

# Exact keys holding a notification destination
DESTINATION_KEYS: FrozenSet[str] = frozenset(
    {"to", "destination", "channel_value", "recipient"}
)


def add_app_info(app_name: str, app_version: str = "unknown") -> Processor:
    """Stamp ``app_name`` and ``app_version`` on every event."""

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict["app_name"] = app_name
        event_dict["app_version"] = app_version
        return event_dict

    return processor


def mask_destination(value: str, visible: int = 4) -> str:
    """Keep the trailing ``visible`` characters.

    Example:
        mask_destination("+15551234567")  # "********4567"
    """
    hidden = max(len(value) - visible, 0)
    if hidden == 0:
        return "*" * len(value)
    return "*" * hidden + value[hidden:]


def mask_sensitive_data(
    mask_value: str = REDACTED,
    additional_patterns: Optional[FrozenSet[str]] = None,
) -> Processor:
    """Redact credentials and partially mask destinations.

    Args:
        mask_value: Replacement for credential values
        additional_patterns: Extra substrings that mark a key as sensitive
    """
    patterns = SENSITIVE_PATTERNS | (additional_patterns or frozenset())

    def _mask(key: str, value: Any) -> Any:
        if value is None:
            return None
        lowered = key.lower()
        if any(pattern in lowered for pattern in patterns):
            return mask_value
        if lowered in DESTINATION_KEYS and isinstance(value, str):
            return mask_destination(value)
        return value

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        return {key: _mask(key, value) for key, value in event_dict.items()}

    return processor


def truncate_large_values(max_length: int = 500) -> Processor:
    """Cap string values at ``max_length`` characters."""

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in event_dict.items():
            if isinstance(value, str) and len(value) > max_length:
                event_dict[key] = (
                    f"{value[:max_length]}...[truncated, {len(value)} chars total]"
                )
        return event_dict

    return processor
