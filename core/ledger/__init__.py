"""
Balance Ledger

(asset, account) 잔고, 전체 평가 합계, 정산 저널.

사용 예시:
```python
from core.ledger import BalanceLedger, JournalEntry

ledger = BalanceLedger(db)

entry = JournalEntry.create(OperationKind.DEPOSIT, "WETH", "alice", amount, value)
total_after = await ledger.settle_credit(entry, "WETH", amount)

balance = await ledger.get_balance("WETH", "alice")
total = await ledger.total_valued()
```
"""

from core.ledger.schema import init_ledger_schema
from core.ledger.store import BalanceLedger
from core.ledger.types import JournalEntry

__all__ = [
    "BalanceLedger",
    "JournalEntry",
    "init_ledger_schema",
]
