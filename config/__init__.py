"""
Configuration Module for Invoice OCR Text Extraction.

The bundled settings.yaml holds every heuristic threshold, catalog and OCR
setting with its default. A user settings file (CLI --config, or the
INVOICE_OCR_CONFIG environment variable) only needs the keys it changes:
it is layered over the bundled defaults.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = Path(__file__).parent / "settings.yaml"
CONFIG_ENV_VAR = "INVOICE_OCR_CONFIG"


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively layer override onto a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigurationManager:
    """
    Process-wide access to the extraction settings.

    The first construction decides which user file (if any) is layered
    over the defaults; later constructions return the same instance.

    Attributes:
        config_path (Optional[Path]): User settings file, or None.

    Example:
        >>> config = ConfigurationManager()
        >>> config.get("extraction.vat.default_rate")
        0.15
        >>> config.get("ocr.tesseract.lang")
        'ara+eng'
    """

    _instance: Optional['ConfigurationManager'] = None

    def __new__(cls, config_path: Optional[str] = None) -> 'ConfigurationManager':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Load the settings once.

        Args:
            config_path: Optional user settings file. Falls back to the
                        INVOICE_OCR_CONFIG environment variable.
        """
        if self._initialized:
            return

        config_path = config_path or os.environ.get(CONFIG_ENV_VAR)
        self.config_path = Path(config_path) if config_path else None
        self._config: Dict[str, Any] = {}

        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """
        Read the bundled defaults and layer the user file over them.

        Raises:
            FileNotFoundError: If a settings file doesn't exist.
            ValueError: If a file is not a mapping or a threshold is invalid.
            yaml.YAMLError: If a file is not valid YAML.
        """
        config = _read_yaml(DEFAULT_CONFIG_PATH)
        if self.config_path is not None:
            config = _merge(config, _read_yaml(self.config_path))

        self._config = config
        self._resolve_log_path()
        self._validate()

    def _resolve_log_path(self) -> None:
        """Anchor a relative log file path at the project root."""
        log_path = self.get("logging.file.path")
        if log_path and not Path(log_path).is_absolute():
            self._config['logging']['file']['path'] = str(PROJECT_ROOT / log_path)

    def _validate(self) -> None:
        min_length = self.get("extraction.invoice_number.min_length", 3)
        max_length = self.get("extraction.invoice_number.max_length", 10)
        if not 0 < min_length <= max_length:
            raise ValueError(
                f"Invalid invoice number length range: {min_length}..{max_length}"
            )

        rate = self.get("extraction.vat.default_rate", 0.15)
        if rate < 0:
            raise ValueError(f"VAT rate must not be negative: {rate}")

        ratio = self.get("extraction.customer.min_letter_ratio", 0.7)
        if not 0 <= ratio <= 1:
            raise ValueError(f"Letter ratio must be between 0 and 1: {ratio}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a value by dot-separated key.

        Args:
            key: Key such as "extraction.vat.default_rate".
            default: Returned when any part of the key is missing.

        Example:
            >>> config.get("extraction.customer.default_name")
            'Unknown Customer'
            >>> config.get("nonexistent.key", "default_value")
            'default_value'
        """
        value: Any = self._config
        for part in key.split('.'):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def get_all(self) -> Dict[str, Any]:
        """Return a deep copy of the effective settings."""
        return copy.deepcopy(self._config)

    def reload(self) -> None:
        """Re-read the settings files."""
        self._load_config()

    @classmethod
    def reset(cls) -> None:
        """Forget the current instance so the next one reloads from disk."""
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """Shortcut for ConfigurationManager().get(key, default)."""
    return ConfigurationManager().get(key, default)


__all__ = ['ConfigurationManager', 'get_config', 'CONFIG_ENV_VAR']
