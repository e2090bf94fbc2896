"""
Access Gate 어댑터
"""

from adapters.access.static_gate import StaticAccessGate

__all__ = ["StaticAccessGate"]
