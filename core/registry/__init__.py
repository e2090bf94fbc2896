"""
Asset Registry 모듈
"""

from core.registry.asset_registry import AssetRegistry

__all__ = [
    "AssetRegistry",
]
