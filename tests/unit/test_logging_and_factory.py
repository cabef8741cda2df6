import json
import logging
import pytest

from lti_trust.modules.keys.adapters.factory import KeySourceFactory
from lti_trust.modules.keys.adapters.key_vault import KeyVaultKeyMaterialSource
from lti_trust.modules.keys.adapters.static import StaticKeyMaterialSource
from lti_trust.shared.core.config import Settings
from lti_trust.shared.core.exceptions import ConfigurationError
from lti_trust.shared.core.logging import sensitive_field_redactor, setup_logging


def test_redactor_masks_login_hints():
    event = sensitive_field_redactor(None, "info", {
        "event": "lti_login_initiated",
        "login_hint": "user123",
        "target_link_uri": "https://tool/launch",
        "details": {"lti_message_hint": "abc"},
    })

    assert event["login_hint"] == "[REDACTED]"
    assert event["details"]["lti_message_hint"] == "[REDACTED]"
    assert event["target_link_uri"] == "https://tool/launch"


def test_factory_builds_key_vault_source():
    source = KeySourceFactory.create(Settings(TESTING=True, KEY_SOURCE="key_vault", KEY_VAULT_RETRY_ATTEMPTS=5))
    assert isinstance(source, KeyVaultKeyMaterialSource)
    assert source.retry_attempts == 5


def test_factory_builds_static_source():
    source = KeySourceFactory.create(Settings(TESTING=True, KEY_SOURCE="static"))
    assert isinstance(source, StaticKeyMaterialSource)


def test_factory_rejects_unknown_source():
    with pytest.raises(ConfigurationError):
        KeySourceFactory.create(Settings(TESTING=True, KEY_SOURCE="filesystem"))


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def test_stdlib_records_use_structlog_formatting(restore_root_logging, capsys):
    setup_logging()

    logging.getLogger("uvicorn.error").info("server_ready")

    line = capsys.readouterr().out.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "server_ready"
    assert record["level"] == "info"
    assert "timestamp" in record


def test_azure_http_logging_is_quieted(restore_root_logging):
    setup_logging()
    assert logging.getLogger("azure.core.pipeline.policies.http_logging_policy").level == logging.WARNING
