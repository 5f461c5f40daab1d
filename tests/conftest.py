"""
Shared fixtures for the toolbox tests.

Outbound HTTP never leaves the process: every registry built here gets an
httpx.AsyncClient backed by httpx.MockTransport.
"""

import pytest

from core.config import Settings
from core.context import ToolContext
from core.toolbox import build_registry

from _helpers import RecordingHandler, mock_http_client


@pytest.fixture
def settings():
    return Settings(hf_token=None, http_timeout=5.0)


@pytest.fixture
def make_registry(settings):
    """Factory: build_registry() with a mocked HTTP transport."""

    def _make(handler=None, settings_override=None, **context_kwargs):
        http_client = mock_http_client(handler or RecordingHandler(json=[]))
        context = ToolContext(settings_override or settings, http_client=http_client, **context_kwargs)
        return build_registry(context)

    return _make


@pytest.fixture
def registry(make_registry):
    return make_registry()
