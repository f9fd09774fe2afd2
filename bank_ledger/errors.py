"""
Ledger Error Taxonomy

Validation errors subclass ValueError so callers may treat them as bad input.
TransferRollbackFailed is the one fatal class: funds have left the ledger
and an operator has to reconcile by hand.
"""

from decimal import Decimal
from typing import Optional


class LedgerError(Exception):
    """Base class for all ledger errors"""
    code = "ledger_error"


class ValidationError(LedgerError, ValueError):
    """Recoverable error caused by the request, state is unchanged"""
    code = "validation_error"


class InvalidAmount(ValidationError):
    """Amount is negative, zero where forbidden, or not a number"""
    code = "invalid_amount"


class InsufficientFunds(ValidationError):
    """Withdrawal exceeds the current balance"""
    code = "insufficient_funds"
    
    def __init__(self, account_id: str, requested: Decimal, available: Decimal):
        self.account_id = account_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient funds in account {account_id}: "
            f"requested {requested}, available {available}"
        )


class AccountNotFound(ValidationError):
    """Unknown account id"""
    code = "account_not_found"
    
    def __init__(self, account_id: str, message: Optional[str] = None):
        self.account_id = account_id
        super().__init__(message or f"Account {account_id} does not exist")


class AccountInactive(AccountNotFound):
    """Account exists but has been closed"""
    code = "account_inactive"
    
    def __init__(self, account_id: str):
        super().__init__(account_id, f"Account {account_id} is inactive")


class InvalidParticipants(ValidationError):
    """Transfer is missing its source or destination"""
    code = "invalid_participants"


class DuplicateAccount(ValidationError):
    """An account with the same id is already registered"""
    code = "duplicate_account"
    
    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account {account_id} already exists")


class DuplicateTransaction(ValidationError):
    """A history entry with the same transaction id already exists"""
    code = "duplicate_transaction"
    
    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} already recorded")


class TransferRollbackFailed(LedgerError, RuntimeError):
    """
    Compensating deposit failed after a successful withdrawal.
    
    The withdrawn amount is no longer held by any account. This is never
    retried automatically.
    """
    code = "rollback_failed"
    
    def __init__(self, transaction_id: str, source_id: str, amount: Decimal):
        self.transaction_id = transaction_id
        self.source_id = source_id
        self.amount = amount
        super().__init__(
            f"Transaction {transaction_id}: rollback of {amount} to account "
            f"{source_id} failed, ledger is inconsistent and requires operator intervention"
        )
