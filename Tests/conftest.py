"""
Root conftest.py for shared test fixtures and configuration.
This file provides common fixtures used across the test suite.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
import sys

import httpx

# Add project root to Python path for consistent imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ai_chat import config as ai_chat_config
from ai_chat.Chat.conversation_controller import ConversationController
from ai_chat.Chat.session_store import SessionStore
from ai_chat.LLM_Calls.LLM_Backends import BackendGateway
from ai_chat.LLM_Calls.provider_registry import DEFAULT_PROVIDERS, ProviderRegistry

API_KEY_ENV_VARS = ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GEMINI_API_KEY", "GROK_API_KEY")


# ========== Path and File System Fixtures ==========

@pytest.fixture
def isolated_temp_dir():
    """Create an isolated temporary directory that's always cleaned up."""
    temp_dir = tempfile.mkdtemp(prefix="ai_chat_test_")
    temp_path = Path(temp_dir)
    yield temp_path
    # Ensure cleanup even if test fails
    if temp_path.exists():
        shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def history_dir(isolated_temp_dir):
    """Directory for saved session records."""
    return isolated_temp_dir / "history"


# ========== Test Environment Isolation ==========

@pytest.fixture(autouse=True)
def isolate_test_environment(monkeypatch, tmp_path):
    """Automatically isolate tests from the user's config file and API keys.

    This fixture:
    - Points AI_CHAT_CONFIG at a config file inside tmp_path
    - Removes every provider API key from the environment
    - Drops the cached configuration before and after each test
    """
    monkeypatch.setenv(ai_chat_config.CONFIG_PATH_ENV_VAR, str(tmp_path / "config" / "config.toml"))
    for env_var in API_KEY_ENV_VARS:
        monkeypatch.delenv(env_var, raising=False)
    ai_chat_config.set_config_path(None)
    yield tmp_path
    ai_chat_config.set_config_path(None)


# ========== Component Fixtures ==========

@pytest.fixture
def registry():
    return ProviderRegistry()


@pytest.fixture
def reduced_registry():
    """Catalog without grok, for simulating catalog drift."""
    return ProviderRegistry([p for p in DEFAULT_PROVIDERS if p.name != "grok"])


@pytest.fixture
def store(history_dir, registry):
    return SessionStore(history_dir, registry)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler):
        self.requests = []

        def _record(request):
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def recording_transport():
    """Factory for RecordingTransport instances."""
    return RecordingTransport


@pytest.fixture
def openai_transport():
    """Transport answering every request in the OpenAI chat-completions shape with ``text``."""
    def _make(text):
        return RecordingTransport(
            lambda request: httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": text}}]})
        )
    return _make


@pytest.fixture
def no_keys():
    """Key resolver that never finds a credential."""
    return lambda provider, env_var: None


@pytest.fixture
def all_keys():
    """Key resolver that returns a fake credential for every provider."""
    return lambda provider, env_var: f"test-key-{provider}"


@pytest.fixture
def make_gateway(registry, no_keys):
    """Build a gateway with a given key resolver and transport."""
    def _make(key_resolver=None, transport=None, api_settings=None, gateway_registry=None):
        return BackendGateway(
            gateway_registry or registry,
            api_settings=api_settings,
            key_resolver=key_resolver or no_keys,
            transport=transport,
        )
    return _make


@pytest.fixture
def make_controller(registry, store, make_gateway):
    """Build a controller over the temp history dir; extra kwargs go to the constructor."""
    def _make(gateway=None, controller_registry=None, controller_store=None, **kwargs):
        reg = controller_registry or registry
        return ConversationController(
            reg,
            controller_store or store,
            gateway or make_gateway(gateway_registry=reg),
            **kwargs,
        )
    return _make


@pytest.fixture
def controller(make_controller):
    """Controller on openai with no credentials configured, already started."""
    ctrl = make_controller(provider="openai")
    ctrl.start()
    return ctrl


# ========== Pytest Configuration ==========

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests that don't require external resources")
    config.addinivalue_line("markers", "integration: Integration tests that may use files/network")
    config.addinivalue_line("markers", "ui: Textual pilot tests")
