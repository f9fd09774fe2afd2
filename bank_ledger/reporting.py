"""
Reporting Module

Read-only, point-in-time views of ledger balances restricted to active
accounts.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from .accounts import Account
from .money import ZERO, format_amount


@dataclass(frozen=True)
class LedgerSnapshot:
    """
    Balances of active accounts and their total, taken in one locked scope
    """
    balances: Dict[str, Decimal]
    total: Decimal
    taken_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    
    @classmethod
    def from_accounts(cls, accounts: Iterable[Account]) -> 'LedgerSnapshot':
        """Build a snapshot; the caller must hold the ledger lock"""
        balances = {account.id: account.balance for account in accounts}
        return cls(balances=balances, total=sum(balances.values(), ZERO))
    
    @property
    def account_count(self) -> int:
        return len(self.balances)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "balances": {account_id: str(balance) for account_id, balance in self.balances.items()},
            "total": str(self.total),
            "account_count": self.account_count,
            "taken_at": self.taken_at.isoformat(),
        }


def format_report(snapshot: LedgerSnapshot, precision: Optional[int] = None) -> str:
    """Render per-account lines followed by the total"""
    lines = [
        f"Account ID: {account_id}, Balance: {format_amount(balance, precision)}"
        for account_id, balance in sorted(snapshot.balances.items())
    ]
    lines.append(f"Total Balance: {format_amount(snapshot.total, precision)}")
    return "\n".join(lines)
