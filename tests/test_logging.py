"""Tests for the interaction log format and the logging middleware."""

from unittest.mock import AsyncMock

import pytest

from sleepbot.logging_config import _interaction_renderer
from sleepbot.middlewares.logging import LoggingMiddleware


def test_interaction_line_puts_known_keys_first():
    line = _interaction_renderer(None, "info", {
        "timestamp": "2024-05-01 10:00:00",
        "level": "info",
        "event": "Button pressed",
        "logger": "bot.interactions.middleware",
        "request_id": "abc123",
        "data": "rate:temp:3",
        "chat_id": 42,
        "user_id": None,
    })

    assert line == "2024-05-01 10:00:00 | INFO | Button pressed | chat_id=42 data=rate:temp:3 request_id=abc123"


def test_interaction_line_without_context():
    line = _interaction_renderer(None, "info", {"level": "warning", "event": "Started"})

    assert line == "WARNING | Started"


@pytest.mark.asyncio
async def test_middleware_passes_result_and_request_id():
    handler = AsyncMock(return_value="handled")
    data = {}

    event = object()

    result = await LoggingMiddleware()(handler, event, data)

    assert result == "handled"
    assert len(data["request_id"]) == 12
    handler.assert_awaited_once_with(event, data)


@pytest.mark.asyncio
async def test_middleware_reraises_handler_errors():
    handler = AsyncMock(side_effect=RuntimeError("boom"))

    with pytest.raises(RuntimeError):
        await LoggingMiddleware()(handler, object(), {})
