"""
Interactive Banking Menu

Numbered command loop over a Ledger. Each option collects its input and
calls exactly one ledger operation; ledger errors are printed, never raised.
"""

import sys
from typing import Callable, Dict, Optional, TextIO

from .errors import LedgerError
from .ledger import Ledger
from .money import decimal_from_string, format_amount
from .reporting import format_report


MENU = (
    "1. Create Savings Account",
    "2. Deposit",
    "3. Withdraw",
    "4. Balance",
    "5. Transfer Funds",
    "6. Report",
    "7. Close Account",
    "8. Transaction History",
    "9. Exit",
)


class BankingShell:
    """Menu-driven front end for a ledger"""
    
    def __init__(self, ledger: Ledger, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.ledger = ledger
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self._commands: Dict[str, Callable[[], None]] = {
            "1": self.create_savings_account,
            "2": self.deposit,
            "3": self.withdraw,
            "4": self.balance,
            "5": self.transfer,
            "6": self.report,
            "7": self.close_account,
            "8": self.history,
        }
    
    def _print(self, message: str = "") -> None:
        self.stdout.write(message + "\n")
    
    def _ask(self, prompt: str) -> str:
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError
        return line.strip()
    
    def _ask_amount(self, prompt: str):
        return decimal_from_string(self._ask(prompt))
    
    def run(self) -> None:
        """Loop until the user exits or input ends"""
        while True:
            self._print()
            for line in MENU:
                self._print(line)
            try:
                choice = self._ask("Enter your choice: ")
                if choice == "9":
                    self._print("Exiting...")
                    return
                command = self._commands.get(choice)
                if command is None:
                    self._print("Invalid choice. Please try again.")
                    continue
                command()
            except LedgerError as e:
                self._print(f"Error: {e}")
            except EOFError:
                self._print("Exiting...")
                return
    
    def create_savings_account(self) -> None:
        self._print("Creating Savings Account...")
        account_id = self._ask("Enter account ID: ")
        balance = self._ask_amount("Enter initial balance: ")
        rate = self._ask_amount("Enter interest rate: ")
        account = self.ledger.new_savings_account(account_id, balance, rate)
        self._print(f"Savings Account created successfully with ID {account.id}")
    
    def deposit(self) -> None:
        self._print("Depositing Funds...")
        account_id = self._ask("Enter account ID: ")
        amount = self._ask_amount("Enter amount to deposit: ")
        self.ledger.deposit(account_id, amount)
        self._print("Deposit successful.")
    
    def withdraw(self) -> None:
        self._print("Withdrawing Funds...")
        account_id = self._ask("Enter account ID: ")
        amount = self._ask_amount("Enter amount to withdraw: ")
        self.ledger.withdraw(account_id, amount)
        self._print("Withdrawal successful.")
    
    def balance(self) -> None:
        self._print("Balance...")
        account_id = self._ask("Enter account ID: ")
        account = self.ledger.get_account(account_id)
        if not self.ledger.is_account_active(account_id):
            self._print("Error: Account is inactive.")
            return
        balance = format_amount(account.balance, self.ledger.config.amount_precision)
        self._print(f"Balance for {account_id} is {balance}")
    
    def transfer(self) -> None:
        self._print("Transferring Funds...")
        from_id = self._ask("Enter source account ID: ")
        to_id = self._ask("Enter destination account ID: ")
        amount = self._ask_amount("Enter amount to transfer: ")
        self.ledger.transfer_funds(from_id, to_id, amount)
        self._print("Funds transferred successfully.")
    
    def report(self) -> None:
        self._print("Generating Report...")
        self._print(format_report(self.ledger.snapshot(), self.ledger.config.amount_precision))
    
    def close_account(self) -> None:
        self._print("Closing Account...")
        account_id = self._ask("Enter account ID: ")
        self.ledger.get_account(account_id)
        if not self.ledger.is_account_active(account_id):
            self._print("Error: Account is already inactive.")
            return
        self.ledger.close_account(account_id)
        self._print("Account closed successfully.")
    
    def history(self) -> None:
        self._print("Displaying Transaction History...")
        self.ledger.display_transaction_history(self.stdout)
