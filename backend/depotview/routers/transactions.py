# backend/depotview/routers/transactions.py
"""
Transaction history endpoint.

- GET /clients/{client_id}/transactions - Statement lines, newest first by default
"""

from fastapi import APIRouter, Depends, Query, Request

from depotview.config import settings
from depotview.dependencies import get_portfolio_service
from depotview.middleware.rate_limit import limiter, RATE_LIMIT_DEFAULT
from depotview.schemas.transactions import TransactionListResponse, TransactionResponse
from depotview.services.portfolio import PortfolioService, format_currency
from depotview.services.portfolio.types import TransactionRecord
from depotview.services.portfolio.views import normalize_direction

router = APIRouter(
    prefix="/clients",
    tags=["Transactions"],
)


def _map_transaction(transaction: TransactionRecord) -> TransactionResponse:
    """Map internal TransactionRecord to Pydantic schema."""
    currency = settings.display_currency
    locale = settings.display_locale

    return TransactionResponse(
        client_id=transaction.client_id,
        transaction_id=transaction.transaction_id,
        date=transaction.date,
        asset=transaction.asset,
        isin=transaction.isin,
        ticker=transaction.ticker,
        asset_type=transaction.asset_type,
        quantity=transaction.quantity,
        unit_price=transaction.unit_price,
        total_value=transaction.total_value,
        unit_price_display=format_currency(transaction.unit_price, currency, locale),
        total_value_display=format_currency(transaction.total_value, currency, locale),
    )


@router.get(
    "/{client_id}/transactions",
    response_model=TransactionListResponse,
    summary="Get a client's transaction history",
)
@limiter.limit(RATE_LIMIT_DEFAULT)
def list_transactions(
        request: Request,  # Required for rate limiting
        client_id: str,
        sort_by: str = Query(
            default="date",
            description="Sort field, e.g. date, asset, total_value",
        ),
        direction: str = Query(
            default="desc",
            description="Sort direction: asc or desc",
        ),
        service: PortfolioService = Depends(get_portfolio_service),
) -> TransactionListResponse:
    """
    List a client's transactions.

    Dates in ISO (2024-01-15) and statement (15.01.2024) format are sorted
    chronologically.

    Raises **404** if the client is unknown, **400** for an invalid sort
    field or direction.
    """
    transactions = service.get_transactions(client_id, sort_by=sort_by, direction=direction)

    return TransactionListResponse(
        client_id=client_id,
        sort_by=sort_by,
        direction=normalize_direction(direction),
        count=len(transactions),
        transactions=[_map_transaction(t) for t in transactions],
    )
