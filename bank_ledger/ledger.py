"""
Ledger Module

The ledger owns every account, the active/closed status of each account and
the transaction history. One re-entrant lock serialises all ledger
operations, including reads, so every call observes a consistent state.
Transfers hold the lock for their whole duration.
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, TextIO
import threading

from .accounts import Account, SavingsAccount
from .config import LedgerConfig, get_config
from .errors import (
    AccountInactive, AccountNotFound, DuplicateAccount, DuplicateTransaction,
    LedgerError, ValidationError
)
from .history import HistoryEntry, TransactionHistory, TransactionIdGenerator, TransactionStatus
from .logging_config import get_logger, log_action
from .money import AmountLike, ZERO, to_amount
from .reporting import LedgerSnapshot
from .transfers import TransferTransaction


class AccountStatus(Enum):
    """Account lifecycle states"""
    ACTIVE = "active"  # Normal operation
    CLOSED = "closed"  # Permanently closed, excluded from reports


class Ledger:
    """
    Registry of accounts with atomic transfers and reporting
    """
    
    def __init__(
        self,
        config: Optional[LedgerConfig] = None,
        history: Optional[TransactionHistory] = None,
        id_generator: Optional[TransactionIdGenerator] = None
    ):
        self.config = config or get_config()
        self.history = history if history is not None else TransactionHistory()
        self.id_generator = id_generator or TransactionIdGenerator(self.config.transaction_id_prefix)
        self.logger = get_logger("bank_ledger.ledger")
        
        self._accounts: Dict[str, Account] = {}
        self._status: Dict[str, AccountStatus] = {}
        self._lock = threading.RLock()
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)
    
    def create_account(self, account: Account) -> Account:
        """
        Register an account as active
        
        Raises:
            DuplicateAccount: If the id is taken and overwriting is disabled
        """
        with self._lock:
            account_id = account.id
            if account_id in self._accounts:
                if not self.config.allow_account_overwrite:
                    raise DuplicateAccount(account_id)
                self.logger.warning("Overwriting existing account %s", account_id)
            
            self._accounts[account_id] = account
            self._status[account_id] = AccountStatus.ACTIVE
        
        log_action(
            self.logger, "info", f"Account created: {account_id}",
            action="create_account", resource=f"account:{account_id}",
            extra={"kind": account.kind.value, "balance": str(account.balance)}
        )
        return account
    
    def new_savings_account(
        self,
        account_id: str,
        balance: AmountLike = ZERO,
        interest_rate: AmountLike = ZERO
    ) -> SavingsAccount:
        """Create and register a savings account"""
        account = SavingsAccount(
            account_id,
            balance=balance,
            interest_rate=interest_rate,
            precision=self.config.amount_precision
        )
        self.create_account(account)
        return account
    
    def close_account(self, account_id: str) -> None:
        """
        Mark an account as closed. Closing twice has no further effect.
        
        Raises:
            AccountNotFound: If the account does not exist
        """
        with self._lock:
            if account_id not in self._accounts:
                raise AccountNotFound(account_id)
            self._status[account_id] = AccountStatus.CLOSED
        
        log_action(
            self.logger, "info", f"Account closed: {account_id}",
            action="close_account", resource=f"account:{account_id}"
        )
    
    def get_account(self, account_id: str) -> Account:
        """
        Get an account by id, closed accounts included
        
        Raises:
            AccountNotFound: If the account does not exist
        """
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                raise AccountNotFound(account_id)
            return account
    
    def is_account_active(self, account_id: str) -> bool:
        """False for both unknown and closed accounts"""
        with self._lock:
            return self._status.get(account_id) == AccountStatus.ACTIVE
    
    def get_status(self, account_id: str) -> AccountStatus:
        with self._lock:
            if account_id not in self._status:
                raise AccountNotFound(account_id)
            return self._status[account_id]
    
    def _active_account(self, account_id: str) -> Account:
        """Resolve an account that must be active; caller holds the lock"""
        account = self._accounts.get(account_id)
        if account is None:
            raise AccountNotFound(account_id)
        if self._status[account_id] != AccountStatus.ACTIVE:
            raise AccountInactive(account_id)
        return account
    
    def deposit(self, account_id: str, amount: AmountLike) -> Decimal:
        """Deposit into an active account, returns the new balance"""
        with self._lock:
            return self._active_account(account_id).deposit(amount)
    
    def withdraw(self, account_id: str, amount: AmountLike) -> Decimal:
        """Withdraw from an active account, returns the new balance"""
        with self._lock:
            return self._active_account(account_id).withdraw(amount)
    
    def transfer_funds(self, from_id: str, to_id: str, amount: AmountLike) -> HistoryEntry:
        """
        Transfer funds between two active accounts
        
        Every attempt, successful or not, is recorded in the history.
        
        Args:
            from_id: Source account id
            to_id: Destination account id
            amount: Positive amount to move
            
        Returns:
            The success history entry
            
        Raises:
            AccountNotFound: If either account is unknown (AccountInactive if closed)
            InvalidAmount: If amount is not positive
            InsufficientFunds: If the source balance is too low
            TransferRollbackFailed: If a failed deposit could not be compensated
        """
        with self._lock:
            transaction_id = self.id_generator.next_id()
            if transaction_id in self.history:
                raise DuplicateTransaction(transaction_id)
            
            recorded_amount = self._amount_for_history(amount)
            
            try:
                source = self._active_account(from_id)
                destination = self._active_account(to_id)
                
                transfer = TransferTransaction(
                    transaction_id, source, destination, amount,
                    precision=self.config.amount_precision
                )
                transfer.execute()
            except Exception as e:
                self._record_failure(transaction_id, from_id, to_id, recorded_amount, e)
                raise
            
            entry = self.history.record(
                transaction_id, from_id, to_id, transfer.amount, TransactionStatus.SUCCESS
            )
        
        log_action(
            self.logger, "info", f"Transfer completed: {transaction_id}",
            action="transfer_funds", resource=f"transaction:{transaction_id}",
            extra={"from": from_id, "to": to_id, "amount": str(entry.amount)}
        )
        return entry
    
    def _amount_for_history(self, amount: AmountLike) -> Decimal:
        try:
            return to_amount(amount, self.config.amount_precision)
        except LedgerError:
            return ZERO
    
    def _record_failure(
        self,
        transaction_id: str,
        from_id: str,
        to_id: str,
        amount: Decimal,
        error: Exception
    ) -> None:
        self.history.record(
            transaction_id, from_id, to_id, amount, TransactionStatus.FAILED, reason=str(error)
        )
        level = "warning" if isinstance(error, ValidationError) else "error"
        log_action(
            self.logger, level, f"Transfer failed: {transaction_id}: {error}",
            action="transfer_funds", resource=f"transaction:{transaction_id}",
            extra={
                "from": from_id,
                "to": to_id,
                "amount": str(amount),
                "code": getattr(error, "code", type(error).__name__)
            }
        )
    
    def _active_accounts(self) -> List[Account]:
        return [
            account for account_id, account in self._accounts.items()
            if self._status[account_id] == AccountStatus.ACTIVE
        ]
    
    def report(self) -> Dict[str, Decimal]:
        """Balances of all active accounts"""
        with self._lock:
            return {account.id: account.balance for account in self._active_accounts()}
    
    def total_balance(self) -> Decimal:
        """Sum of the balances of all active accounts"""
        with self._lock:
            return sum((account.balance for account in self._active_accounts()), ZERO)
    
    def snapshot(self) -> LedgerSnapshot:
        """Report and total computed within one locked scope"""
        with self._lock:
            return LedgerSnapshot.from_accounts(self._active_accounts())
    
    def apply_interest(self) -> Dict[str, Decimal]:
        """
        Apply interest to every active interest-bearing account
        
        Returns:
            Interest credited per account id
        """
        with self._lock:
            credited = {
                account.id: account.apply_interest()
                for account in self._active_accounts()
                if account.supports_interest
            }
        
        log_action(
            self.logger, "info", f"Interest applied to {len(credited)} accounts",
            action="apply_interest", resource="ledger",
            extra={"total_interest": str(sum(credited.values(), ZERO))}
        )
        return credited
    
    def transaction_history(self) -> List[HistoryEntry]:
        return self.history.entries()
    
    def account_history(self, account_id: str) -> List[HistoryEntry]:
        """Transfers involving an account, which must exist"""
        self.get_account(account_id)
        return self.history.entries_for_account(account_id)
    
    def display_transaction_history(self, stream: Optional[TextIO] = None) -> str:
        """Render the history, writing it to stream when given"""
        rendered = self.history.render(self.config.amount_precision)
        if stream is not None:
            stream.write(rendered + "\n")
        return rendered
