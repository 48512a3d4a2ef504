"""Utilities for creating callback data."""

from typing import Dict, Optional


class CallbackData:
    """Utility class for creating structured callback data."""

    @staticmethod
    def create(action: str, subaction: Optional[str] = None, value: Optional[object] = None) -> str:
        """Create callback data string."""
        parts = [action]

        if subaction:
            parts.append(subaction)

        if value is not None:
            parts.append(str(value))

        callback_str = ":".join(parts)

        # Telegram limits callback data to 64 bytes
        if len(callback_str.encode("utf-8")) > 64:
            raise ValueError(f"Callback data too long: {callback_str}")

        return callback_str

    @staticmethod
    def parse(callback_data: str) -> Dict[str, Optional[str]]:
        """Parse callback data string."""
        parts = callback_data.split(":", 2)

        return {
            "action": parts[0] if len(parts) > 0 else "",
            "subaction": parts[1] if len(parts) > 1 else None,
            "value": parts[2] if len(parts) > 2 else None,
        }


# Predefined callback data constants
class Callbacks:
    """Predefined callback data strings."""

    # Survey navigation
    SURVEY_START = "survey:start"
    SURVEY_SUBMIT = "survey:submit"
    EXPERIENCES_DONE = "exp:done"

    # Answer prefixes, completed with field and value
    RATING = "rate"
    TEXT = "text"
    EXPERIENCE = "exp"

    # Result acknowledgment
    RESULT_RESTART = "result:restart"
    RESULT_OK = "result:ok"
