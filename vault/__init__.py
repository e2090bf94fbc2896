"""
Vault 패키지

다중 자산 보관 Vault의 흐름(직접 입출금, Swap 입금)과 관리 작업.
"""

from vault.custodian import Custodian
from vault.guard import OperationGuard

__all__ = [
    "Custodian",
    "OperationGuard",
]
