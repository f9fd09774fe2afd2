"""
Pydantic schemas for API requests and responses
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class CreateAccountRequest(BaseModel):
    account_id: str = Field(..., min_length=1, description="Unique account id")
    balance: str = Field("0", description="Opening balance as decimal string")
    interest_rate: str = Field("0", description="Interest rate per application, e.g. 0.05")


class AmountRequest(BaseModel):
    amount: str = Field(..., description="Decimal amount as string")


class TransferRequest(BaseModel):
    from_account_id: str
    to_account_id: str
    amount: str = Field(..., description="Decimal amount as string")


class AccountResponse(BaseModel):
    id: str
    kind: str
    balance: str
    interest_rate: Optional[str] = None
    active: bool


class HistoryEntryResponse(BaseModel):
    transaction_id: str
    source_id: str
    destination_id: str
    amount: str
    status: str
    reason: Optional[str] = None
    sequence: int
    recorded_at: str


class SnapshotResponse(BaseModel):
    balances: Dict[str, str]
    total: str
    account_count: int
    taken_at: str


class HistoryResponse(BaseModel):
    transactions: List[HistoryEntryResponse]
