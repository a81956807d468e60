"""
Config Protocol - Interface for configuration management.

Defines the contract for configuration access without requiring concrete Config import.
"""

from typing import Any, Dict, Optional, Protocol


class ConfigProtocol(Protocol):
    """Protocol defining the settings the ISS client reads."""

    @property
    def API_BASE(self) -> str: ...

    @property
    def REQUEST_TIMEOUT(self) -> Optional[float]: ...

    @property
    def LOGGER_DEBUG(self) -> bool: ...

    @property
    def LOG_DIR(self) -> str: ...

    def get_config(self, section: str, key: str, default: Any = None) -> Any: ...

    def get_section(self, section: str) -> Dict[str, Any]: ...
