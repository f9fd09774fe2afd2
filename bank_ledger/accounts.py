"""
Account Module

Defines the account contract used by the ledger and the interest-bearing
savings account. Every balance mutation happens under the account's own lock
so that direct deposits and withdrawals made outside the ledger stay atomic.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional
import threading

from .errors import InsufficientFunds, InvalidAmount, ValidationError
from .money import AmountLike, ZERO, quantize, to_amount, to_rate


class AccountKind(Enum):
    """Account product types"""
    SAVINGS = "savings"  # Interest-bearing savings account


class Account(ABC):
    """
    Balance-holding entity owned by a ledger.
    
    Implementations must keep the balance non-negative and make each
    mutation a single critical section.
    """
    
    kind: AccountKind
    
    @property
    @abstractmethod
    def id(self) -> str:
        """Stable, non-empty identifier"""
    
    @property
    @abstractmethod
    def balance(self) -> Decimal:
        """Current balance"""
    
    @abstractmethod
    def deposit(self, amount: AmountLike) -> Decimal:
        """Add funds, returns the new balance"""
    
    @abstractmethod
    def withdraw(self, amount: AmountLike) -> Decimal:
        """Remove funds, returns the new balance"""
    
    @property
    def supports_interest(self) -> bool:
        """Check if the account accrues interest"""
        return False
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for reporting"""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "balance": str(self.balance),
        }


class SavingsAccount(Account):
    """Savings account with interest applied on demand"""
    
    kind = AccountKind.SAVINGS
    
    def __init__(
        self,
        account_id: str,
        balance: AmountLike = ZERO,
        interest_rate: AmountLike = ZERO,
        precision: Optional[int] = None
    ):
        if not isinstance(account_id, str) or not account_id.strip():
            raise ValidationError("Account id must be a non-empty string")
        
        opening_balance = to_amount(balance, precision)
        if opening_balance < ZERO:
            raise InvalidAmount("Initial balance cannot be negative")
        
        rate = to_rate(interest_rate)
        if rate < ZERO:
            raise InvalidAmount("Interest rate cannot be negative")
        
        self._id = account_id
        self._balance = opening_balance
        self._interest_rate = rate
        self._precision = precision
        self._lock = threading.Lock()
    
    def __repr__(self) -> str:
        return (
            f"SavingsAccount(id={self._id!r}, balance={self.balance}, "
            f"interest_rate={self._interest_rate})"
        )
    
    @property
    def id(self) -> str:
        return self._id
    
    @property
    def balance(self) -> Decimal:
        with self._lock:
            return self._balance
    
    @property
    def interest_rate(self) -> Decimal:
        return self._interest_rate
    
    @property
    def supports_interest(self) -> bool:
        return True
    
    def deposit(self, amount: AmountLike) -> Decimal:
        """
        Deposit funds into the account
        
        Raises:
            InvalidAmount: If amount is negative or not a number
        """
        value = to_amount(amount, self._precision)
        if value < ZERO:
            raise InvalidAmount("Deposit amount must be positive")
        
        with self._lock:
            self._balance += value
            return self._balance
    
    def withdraw(self, amount: AmountLike) -> Decimal:
        """
        Withdraw funds from the account
        
        The balance check and the subtraction share one critical section.
        
        Raises:
            InvalidAmount: If amount is negative or not a number
            InsufficientFunds: If amount exceeds the balance
        """
        value = to_amount(amount, self._precision)
        if value < ZERO:
            raise InvalidAmount("Withdrawal amount must be positive")
        
        with self._lock:
            if self._balance < value:
                raise InsufficientFunds(self._id, value, self._balance)
            self._balance -= value
            return self._balance
    
    def apply_interest(self) -> Decimal:
        """
        Apply interest: balance becomes balance * (1 + interest_rate)
        
        Returns:
            Interest credited, rounded to the minor unit
        """
        with self._lock:
            new_balance = quantize(self._balance * (Decimal('1') + self._interest_rate), self._precision)
            interest = new_balance - self._balance
            self._balance = new_balance
            return interest
    
    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["interest_rate"] = str(self._interest_rate)
        return result
