"""
Bank Ledger

An in-memory, thread-safe ledger of bank accounts with atomic transfers,
an append-only transaction history and point-in-time balance reports.
All monetary values use Decimal precision.
"""

__version__ = "1.0.0"
