"""
Tests for the YAML configuration manager.
"""

import pytest

from config import CONFIG_ENV_VAR, ConfigurationManager, get_config


def _write(tmp_path, text, name="settings.yaml"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_dot_notation_lookup():
    assert get_config("extraction.vat.default_rate") == 0.15
    assert get_config("ocr.tesseract.lang") == "ara+eng"
    assert get_config("extraction.customer.default_name") == "Unknown Customer"


def test_missing_key_returns_default():
    assert get_config("nonexistent.key", "default_value") == "default_value"
    assert get_config("extraction.vat.default_rate.deeper") is None


def test_singleton():
    assert ConfigurationManager() is ConfigurationManager()


def test_get_all_returns_deep_copy():
    config = ConfigurationManager()
    snapshot = config.get_all()
    snapshot["extraction"]["max_text_length"] = 1
    assert config.get("extraction.max_text_length") == 100000


def test_log_path_anchored_at_project_root():
    assert get_config("logging.file.path").endswith("logs/invoice_ocr.log")
    assert get_config("logging.file.path").startswith("/")


def test_user_file_layered_over_defaults(tmp_path):
    """A user file only needs the keys it changes"""
    custom = _write(tmp_path, "extraction:\n  customer:\n    default_name: Walk-in\n")
    ConfigurationManager(str(custom))

    assert get_config("extraction.customer.default_name") == "Walk-in"
    assert get_config("extraction.customer.min_name_length") == 3
    assert get_config("extraction.vat.default_rate") == 0.15


def test_environment_variable(tmp_path, monkeypatch):
    custom = _write(tmp_path, "ocr:\n  tesseract:\n    psm: 6\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(custom))

    assert get_config("ocr.tesseract.psm") == 6
    assert get_config("ocr.tesseract.lang") == "ara+eng"


def test_empty_user_file_keeps_defaults(tmp_path):
    ConfigurationManager(str(_write(tmp_path, "")))
    assert get_config("ocr.tesseract.psm") == 3


def test_reload_picks_up_changes(tmp_path):
    custom = _write(tmp_path, "extraction:\n  max_text_length: 500\n")
    config = ConfigurationManager(str(custom))
    custom.write_text("extraction:\n  max_text_length: 900\n", encoding="utf-8")

    config.reload()
    assert get_config("extraction.max_text_length") == 900


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigurationManager(str(tmp_path / "missing.yaml"))


@pytest.mark.parametrize("text", [
    "extraction:\n  invoice_number:\n    min_length: 12\n",
    "extraction:\n  vat:\n    default_rate: -0.1\n",
    "extraction:\n  customer:\n    min_letter_ratio: 1.5\n",
    "- not\n- a mapping\n",
])
def test_invalid_settings_rejected(tmp_path, text):
    with pytest.raises(ValueError):
        ConfigurationManager(str(_write(tmp_path, text)))
