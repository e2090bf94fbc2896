"""
core/errors.py 테스트
"""

import pytest

from core.errors import (
    ERROR_KINDS,
    CapExceededError,
    InsufficientBalanceError,
    ReentrancyError,
    VaultError,
)


class TestVaultError:
    """VaultError 테스트"""

    def test_kind_and_details(self) -> None:
        error = CapExceededError("over", attempted_total=10**30, cap=5)

        assert error.kind == "CapExceeded"
        assert error.details == {"attempted_total": 10**30, "cap": 5}
        assert str(error) == "[CapExceeded] over"

    def test_to_dict_stringifies_ints(self) -> None:
        error = InsufficientBalanceError("low", requested=2, available=1, asset="USDC", flag=True)

        assert error.to_dict() == {
            "kind": "InsufficientBalance",
            "message": "low",
            "details": {"requested": "2", "available": "1", "asset": "USDC", "flag": True},
        }

    def test_catchable_as_base(self) -> None:
        with pytest.raises(VaultError):
            raise ReentrancyError("nested")


class TestErrorKinds:
    """ERROR_KINDS 레지스트리"""

    def test_unique_kinds(self) -> None:
        assert len(ERROR_KINDS) == 12
        assert all(issubclass(cls, VaultError) for cls in ERROR_KINDS.values())
        assert ERROR_KINDS["Reentrancy"] is ReentrancyError
