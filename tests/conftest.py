import logging

import pytest

from schema_bridge.config import Settings, get_settings
from schema_bridge.generator.document import load_shell


@pytest.fixture
def settings():
    return Settings(app_name="Test API", api_version="v1", port=3000)


@pytest.fixture
def packaged_shell(settings):
    return load_shell(settings=settings)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for name in ("SCHEMA_BRIDGE_LOG_LEVEL", "SCHEMA_BRIDGE_OUTPUT_FORMAT", "SCHEMA_BRIDGE_APP_NAME", "SCHEMA_BRIDGE_PORT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    # CLI runs install handlers bound to CliRunner's stderr
    logger = logging.getLogger("schema_bridge")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
