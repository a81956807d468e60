"""
Configuration loader for micex_iss.
Loads public client settings from config.ini.
"""

import configparser
import logging
from pathlib import Path
from typing import Any, Dict, Optional

CONFIG_DIR = Path(__file__).parent.resolve()
CONFIG_INI_PATH = CONFIG_DIR / "config.ini"

DEFAULT_API_BASE = "http://www.micex.ru/iss/"


class Config:
    """Configuration class that loads settings from an INI file.

    Implements ConfigProtocol for type safety and dependency injection.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else CONFIG_INI_PATH
        self._config_data: Dict[str, Dict[str, Any]] = {}
        self._load_ini_config()

    def _load_ini_config(self):
        """Load configuration from config.ini file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}.")

        try:
            parser = configparser.ConfigParser()
            parser.read(self.config_path, encoding='utf-8')

            for section_name in parser.sections():
                section_data = {}
                for key, value in parser.items(section_name):
                    section_data[key] = self._convert_value(value)
                self._config_data[section_name] = section_data
        except configparser.Error as e:
            raise RuntimeError(f"Error loading configuration file {self.config_path}: {e}") from e

    @staticmethod
    def _convert_value(value: str) -> Any:
        """Convert string values to appropriate Python types."""
        if value == '':
            return None
        if value.lower() in ('true', 'yes', 'on'):
            return True
        if value.lower() in ('false', 'no', 'off'):
            return False
        if value.isdigit():
            return int(value)
        try:
            if '.' in value:
                return float(value)
        except ValueError:
            pass
        if ',' in value:
            return [item.strip() for item in value.split(',')]
        return value

    def get_config(self, section: str, key: str, default: Any = None) -> Any:
        """Get configuration value from INI file."""
        value = self._config_data.get(section, {}).get(key)
        return default if value is None else value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire configuration section."""
        return self._config_data.get(section, {})

    @property
    def API_BASE(self) -> str:
        base = str(self.get_config('micex', 'api_base', DEFAULT_API_BASE))
        return base if base.endswith('/') else f"{base}/"

    @property
    def REQUEST_TIMEOUT(self) -> Optional[float]:
        timeout = self.get_config('micex', 'request_timeout', None)
        return float(timeout) if timeout is not None else None

    @property
    def LOGGER_DEBUG(self) -> bool:
        return bool(self.get_config('debug', 'logger_debug', False))

    @property
    def LOG_DIR(self) -> str:
        return str(self.get_config('directories', 'log_dir', 'logs'))

    def reload(self):
        """Re-read config.ini so settings can change without restarting."""
        logging.info("Reloading configuration file...")
        self._config_data = {}
        self._load_ini_config()
        logging.info("Configuration reloaded successfully")


# Create global config instance
config = Config()
