"""
스토리지 모듈

런타임 Config Store 인터페이스 제공
"""

from core.storage.config_store import VAULT_CONFIG_KEY, ConfigStore

__all__ = [
    "ConfigStore",
    "VAULT_CONFIG_KEY",
]
