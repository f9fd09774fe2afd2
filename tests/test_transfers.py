"""
Test suite for the transfer unit

Tests validation, the withdraw-then-deposit order, and the compensating
rollback when the destination refuses the deposit.
"""

import pytest
from decimal import Decimal

from bank_ledger.accounts import SavingsAccount
from bank_ledger.errors import (
    InsufficientFunds, InvalidAmount, InvalidParticipants, TransferRollbackFailed
)
from bank_ledger.transfers import TransferTransaction


class RejectingAccount(SavingsAccount):
    """Savings account that refuses every deposit"""
    
    def deposit(self, amount):
        raise InvalidAmount(f"Account {self.id} does not accept deposits")


class TestTransferValidation:
    """Test pre-execution checks"""
    
    def test_missing_source(self):
        """Test transfer without a source"""
        transfer = TransferTransaction("txn-1", None, SavingsAccount("B"), Decimal('10'))
        with pytest.raises(InvalidParticipants, match="Invalid accounts for transfer"):
            transfer.execute()
        assert not transfer.is_success
    
    def test_missing_destination(self):
        """Test transfer without a destination"""
        transfer = TransferTransaction("txn-1", SavingsAccount("A", 10), None, Decimal('10'))
        with pytest.raises(InvalidParticipants):
            transfer.execute()
    
    @pytest.mark.parametrize("amount", [Decimal('0'), Decimal('-5')])
    def test_non_positive_amount(self, amount):
        """Test zero and negative amounts"""
        source = SavingsAccount("A", 100)
        destination = SavingsAccount("B")
        transfer = TransferTransaction("txn-1", source, destination, amount)
        
        with pytest.raises(InvalidAmount, match="Transfer amount must be positive"):
            transfer.execute()
        
        assert source.balance == Decimal('100.00')
        assert destination.balance == Decimal('0')
    
    @pytest.mark.parametrize("amount", ["0.001", Decimal('-0.004')])
    def test_sub_cent_amount(self, amount):
        """Test that amounts finer than a cent are rejected before any withdrawal"""
        source = SavingsAccount("A", 100)
        destination = SavingsAccount("B")
        transfer = TransferTransaction("txn-1", source, destination, amount)
        
        with pytest.raises(InvalidAmount, match="more decimal places"):
            transfer.execute()
        
        assert source.balance == Decimal('100.00')
        assert destination.balance == Decimal('0')


class TestTransferExecution:
    """Test funds movement"""
    
    def setup_method(self):
        """Set up test fixtures"""
        self.source = SavingsAccount("A", Decimal('100'))
        self.destination = SavingsAccount("B", Decimal('0'))
    
    def test_successful_transfer(self):
        """Test that funds move and the flag is set"""
        transfer = TransferTransaction("txn-1", self.source, self.destination, Decimal('40'))
        
        transfer.execute()
        
        assert transfer.is_success
        assert transfer.amount == Decimal('40.00')
        assert self.source.balance == Decimal('60.00')
        assert self.destination.balance == Decimal('40.00')
    
    def test_transfer_conserves_total(self):
        """Test that the sum of both balances is unchanged"""
        before = self.source.balance + self.destination.balance
        TransferTransaction("txn-1", self.source, self.destination, Decimal('33.33')).execute()
        after = self.source.balance + self.destination.balance
        assert before == after
    
    def test_insufficient_funds_is_propagated(self):
        """Test that a failed withdrawal skips the deposit"""
        transfer = TransferTransaction("txn-1", self.source, self.destination, Decimal('1000'))
        
        with pytest.raises(InsufficientFunds):
            transfer.execute()
        
        assert not transfer.is_success
        assert self.source.balance == Decimal('100.00')
        assert self.destination.balance == Decimal('0')
    
    def test_transfer_to_self_is_neutral(self):
        """Test transferring to the same account"""
        TransferTransaction("txn-1", self.source, self.source, Decimal('25')).execute()
        assert self.source.balance == Decimal('100.00')


class TestTransferRollback:
    """Test compensation of a failed deposit"""
    
    def test_deposit_failure_rolls_back(self):
        """Test the source is refunded and the deposit error propagates"""
        source = SavingsAccount("A", Decimal('100'))
        destination = RejectingAccount("B")
        transfer = TransferTransaction("txn-1", source, destination, Decimal('30'))
        
        with pytest.raises(InvalidAmount, match="does not accept deposits"):
            transfer.execute()
        
        assert not transfer.is_success
        assert source.balance == Decimal('100.00')
        assert destination.balance == Decimal('0')
    
    def test_rollback_failure_is_fatal(self):
        """Test that a failed compensation raises TransferRollbackFailed"""
        source = RejectingAccount("A", Decimal('100'))
        destination = RejectingAccount("B")
        transfer = TransferTransaction("txn-9", source, destination, Decimal('30'))
        
        with pytest.raises(TransferRollbackFailed) as exc_info:
            transfer.execute()
        
        error = exc_info.value
        assert error.transaction_id == "txn-9"
        assert error.source_id == "A"
        assert error.amount == Decimal('30.00')
        assert isinstance(error.__cause__, InvalidAmount)
        assert "requires operator intervention" in str(error)
        # The withdrawn amount is not held by any account
        assert source.balance == Decimal('70.00')
        assert destination.balance == Decimal('0')
    
    def test_rollback_failure_is_not_a_validation_error(self):
        """Test that the fatal class cannot be mistaken for bad input"""
        assert not issubclass(TransferRollbackFailed, ValueError)
        assert issubclass(TransferRollbackFailed, RuntimeError)
