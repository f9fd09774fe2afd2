"""
FastAPI REST API Module

Thin HTTP surface over a Ledger instance. Each endpoint delegates to one
ledger operation; ledger errors map to HTTP status codes.
"""

from typing import Optional
from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
import uvicorn

from . import __version__
from .config import get_config
from .errors import (
    AccountInactive, AccountNotFound, DuplicateAccount, DuplicateTransaction, LedgerError,
    TransferRollbackFailed
)
from .ledger import Ledger
from .logging_config import configure_from_settings, get_logger
from .schemas import (
    AccountResponse, AmountRequest, CreateAccountRequest, HistoryEntryResponse,
    HistoryResponse, SnapshotResponse, TransferRequest
)


logger = get_logger("bank_ledger.api")

router = APIRouter()


def get_ledger(request: Request) -> Ledger:
    """Ledger stored on the application state"""
    return request.app.state.ledger


def _status_for(error: LedgerError) -> int:
    if isinstance(error, AccountInactive):
        return status.HTTP_409_CONFLICT
    if isinstance(error, AccountNotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, (DuplicateAccount, DuplicateTransaction)):
        return status.HTTP_409_CONFLICT
    if isinstance(error, TransferRollbackFailed):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    if isinstance(exc, TransferRollbackFailed):
        logger.critical("Unrecoverable transfer failure: %s", exc)
    return JSONResponse(
        status_code=_status_for(exc),
        content={"detail": str(exc), "code": exc.code}
    )


def _account_response(ledger: Ledger, account_id: str) -> AccountResponse:
    account = ledger.get_account(account_id)
    data = account.to_dict()
    return AccountResponse(
        id=data["id"],
        kind=data["kind"],
        balance=data["balance"],
        interest_rate=data.get("interest_rate"),
        active=ledger.is_account_active(account_id)
    )


@router.post("/accounts", status_code=status.HTTP_201_CREATED, response_model=AccountResponse)
def create_account(request: CreateAccountRequest, ledger: Ledger = Depends(get_ledger)):
    """Create a savings account"""
    ledger.new_savings_account(request.account_id, request.balance, request.interest_rate)
    return _account_response(ledger, request.account_id)


@router.get("/accounts/{account_id}", response_model=AccountResponse)
def get_account(account_id: str, ledger: Ledger = Depends(get_ledger)):
    """Get account details, closed accounts included"""
    return _account_response(ledger, account_id)


@router.post("/accounts/{account_id}/close", response_model=AccountResponse)
def close_account(account_id: str, ledger: Ledger = Depends(get_ledger)):
    ledger.close_account(account_id)
    return _account_response(ledger, account_id)


@router.post("/accounts/{account_id}/deposit", response_model=AccountResponse)
def deposit(account_id: str, request: AmountRequest, ledger: Ledger = Depends(get_ledger)):
    ledger.deposit(account_id, request.amount)
    return _account_response(ledger, account_id)


@router.post("/accounts/{account_id}/withdraw", response_model=AccountResponse)
def withdraw(account_id: str, request: AmountRequest, ledger: Ledger = Depends(get_ledger)):
    ledger.withdraw(account_id, request.amount)
    return _account_response(ledger, account_id)


@router.get("/accounts/{account_id}/transactions", response_model=HistoryResponse)
def get_account_transactions(account_id: str, ledger: Ledger = Depends(get_ledger)):
    """Transfers involving one account"""
    entries = ledger.account_history(account_id)
    return {"transactions": [entry.to_dict() for entry in entries]}


@router.post("/transfers", status_code=status.HTTP_201_CREATED, response_model=HistoryEntryResponse)
def transfer(request: TransferRequest, ledger: Ledger = Depends(get_ledger)):
    """Transfer funds between two active accounts"""
    entry = ledger.transfer_funds(request.from_account_id, request.to_account_id, request.amount)
    return entry.to_dict()


@router.get("/transactions", response_model=HistoryResponse)
def list_transactions(ledger: Ledger = Depends(get_ledger)):
    return {"transactions": [entry.to_dict() for entry in ledger.transaction_history()]}


@router.get("/reports/balances", response_model=SnapshotResponse)
def balance_report(ledger: Ledger = Depends(get_ledger)):
    """Balances of active accounts and their total from one snapshot"""
    return ledger.snapshot().to_dict()


@router.post("/interest/apply")
def apply_interest(ledger: Ledger = Depends(get_ledger)):
    credited = ledger.apply_interest()
    return {"credited": {account_id: str(amount) for account_id, amount in credited.items()}}


def create_app(ledger: Optional[Ledger] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Bank Ledger API",
        description="In-memory ledger with atomic transfers",
        version=__version__
    )
    app.state.ledger = ledger if ledger is not None else Ledger()
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.include_router(router)
    
    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "bank_ledger_api",
            "version": __version__
        }
    
    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None):
    """Run the API with uvicorn using configured defaults"""
    settings = get_config()
    configure_from_settings(settings)
    uvicorn.run(
        create_app(),
        host=host or settings.api_host,
        port=port or settings.api_port
    )
