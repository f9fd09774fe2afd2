"""
Transfer Module

A transfer moves funds between two accounts as one attemptable unit. The
withdrawal happens first; if the deposit then fails the withdrawal is
compensated by re-depositing into the source.
"""

from decimal import Decimal
from typing import Optional

from .accounts import Account
from .errors import InvalidAmount, InvalidParticipants, TransferRollbackFailed
from .logging_config import get_logger, log_action
from .money import AmountLike, ZERO, to_amount


class TransferTransaction:
    """
    Single transfer attempt between two accounts
    
    Created per attempt and discarded afterwards; the outcome is kept only
    in the ledger's transaction history.
    """
    
    def __init__(
        self,
        transaction_id: str,
        source: Optional[Account],
        destination: Optional[Account],
        amount: AmountLike,
        precision: Optional[int] = None
    ):
        self.transaction_id = transaction_id
        self.source = source
        self.destination = destination
        self.amount = amount
        self.is_success = False
        self.precision = precision
        self.logger = get_logger("bank_ledger.transfers")
    
    def execute(self) -> None:
        """
        Execute the transfer
        
        Raises:
            InvalidParticipants: If source or destination is missing
            InvalidAmount: If amount is not positive
            InsufficientFunds: Propagated unchanged from the source withdrawal
            TransferRollbackFailed: If the compensating deposit fails
        """
        if self.source is None or self.destination is None:
            raise InvalidParticipants("Invalid accounts for transfer")
        
        amount = to_amount(self.amount, self.precision)
        if amount <= ZERO:
            raise InvalidAmount("Transfer amount must be positive")
        self.amount = amount
        
        self.source.withdraw(amount)
        
        try:
            self.destination.deposit(amount)
        except Exception as deposit_error:
            self._rollback(amount, deposit_error)
            raise
        
        self.is_success = True
    
    def _rollback(self, amount: Decimal, cause: Exception) -> None:
        """Return the withdrawn amount to the source account"""
        log_action(
            self.logger, "warning",
            f"Deposit failed, rolling back withdrawal: {cause}",
            action="rollback_transfer", resource=f"transaction:{self.transaction_id}",
            extra={
                "source": self.source.id,
                "destination": self.destination.id,
                "amount": str(amount)
            }
        )
        try:
            self.source.deposit(amount)
        except Exception as rollback_error:
            self.logger.critical(
                "Rollback failed for %s: %s withdrawn from %s is lost",
                self.transaction_id, amount, self.source.id
            )
            raise TransferRollbackFailed(
                self.transaction_id, self.source.id, amount
            ) from rollback_error
