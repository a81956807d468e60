"""Contracts and protocols for dependency injection"""

from .config import ConfigProtocol

__all__ = ["ConfigProtocol"]
