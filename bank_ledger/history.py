"""
Transaction History Module

Append-only log of every attempted transfer, keyed by transaction id.
Entries are immutable once written and are never deleted.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
import itertools
import threading

from .errors import DuplicateTransaction
from .money import format_amount


class TransactionStatus(Enum):
    """Outcome of a transfer attempt"""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class HistoryEntry:
    """
    Immutable audit record of a transfer attempt
    """
    transaction_id: str
    source_id: str
    destination_id: str
    amount: Decimal
    status: TransactionStatus
    reason: Optional[str] = None  # Failure reason, None on success
    sequence: int = 0             # Insertion order within the history
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    
    @property
    def is_success(self) -> bool:
        return self.status == TransactionStatus.SUCCESS
    
    def involves(self, account_id: str) -> bool:
        """Check if the account took part in this transfer"""
        return account_id in (self.source_id, self.destination_id)
    
    def format(self, precision: Optional[int] = None) -> str:
        return (
            f"Transaction ID: {self.transaction_id}, From: {self.source_id}, "
            f"To: {self.destination_id}, Amount: {format_amount(self.amount, precision)}, "
            f"Status: {self.status.value}"
        )
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with string amounts"""
        return {
            "transaction_id": self.transaction_id,
            "source_id": self.source_id,
            "destination_id": self.destination_id,
            "amount": str(self.amount),
            "status": self.status.value,
            "reason": self.reason,
            "sequence": self.sequence,
            "recorded_at": self.recorded_at.isoformat(),
        }


class TransactionIdGenerator:
    """Monotonic transaction ids: txn-000001, txn-000002, ..."""
    
    def __init__(self, prefix: str = "txn-", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)
        self._lock = threading.Lock()
    
    def next_id(self) -> str:
        with self._lock:
            return f"{self.prefix}{next(self._counter):06d}"


class TransactionHistory:
    """Append-only transfer history"""
    
    def __init__(self):
        self._entries: Dict[str, HistoryEntry] = {}
        self._lock = threading.RLock()
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
    
    def __contains__(self, transaction_id: str) -> bool:
        with self._lock:
            return transaction_id in self._entries
    
    def record(
        self,
        transaction_id: str,
        source_id: str,
        destination_id: str,
        amount: Decimal,
        status: TransactionStatus,
        reason: Optional[str] = None
    ) -> HistoryEntry:
        """
        Append an entry
        
        Raises:
            DuplicateTransaction: If the transaction id is already recorded
        """
        with self._lock:
            if transaction_id in self._entries:
                raise DuplicateTransaction(transaction_id)
            
            entry = HistoryEntry(
                transaction_id=transaction_id,
                source_id=source_id,
                destination_id=destination_id,
                amount=amount,
                status=status,
                reason=reason,
                sequence=len(self._entries) + 1
            )
            self._entries[transaction_id] = entry
            return entry
    
    def get(self, transaction_id: str) -> Optional[HistoryEntry]:
        with self._lock:
            return self._entries.get(transaction_id)
    
    def entries(self) -> List[HistoryEntry]:
        """All entries in insertion order"""
        with self._lock:
            return list(self._entries.values())
    
    def entries_for_account(self, account_id: str) -> List[HistoryEntry]:
        """Entries where the account is the source or the destination"""
        return [entry for entry in self.entries() if entry.involves(account_id)]
    
    def render(self, precision: Optional[int] = None) -> str:
        lines = ["Transaction History:"]
        lines.extend(entry.format(precision) for entry in self.entries())
        lines.append("END")
        return "\n".join(lines)
