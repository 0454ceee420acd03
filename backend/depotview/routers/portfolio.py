# backend/depotview/routers/portfolio.py
"""
Portfolio view endpoints.

- GET  /clients/{client_id}/portfolio - Holdings of a client with live quotes
- POST /portfolio/valuation           - Value posted transactions and quotes (no I/O)

Both return the same PortfolioResponse: the filtered and sorted holdings,
the filter options, totals over ALL holdings and data quality warnings.
Amounts are returned as numbers and as display strings.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request

from depotview.config import settings
from depotview.dependencies import get_portfolio_service
from depotview.middleware.rate_limit import (
    limiter,
    RATE_LIMIT_PORTFOLIO,
    RATE_LIMIT_VALUATION,
)
from depotview.schemas.portfolio import (
    HoldingDisplay,
    HoldingResponse,
    ProfitLossResponse,
    TotalsDisplay,
    PortfolioTotalsResponse,
    PortfolioResponse,
    ValuationRequest,
)
from depotview.services.market_data import normalize_quotes
from depotview.services.portfolio import (
    ALL_TYPES,
    PortfolioService,
    format_currency,
    format_percentage,
    format_quantity,
)
from depotview.services.portfolio.types import Holding, PortfolioSnapshot, PortfolioTotals
from depotview.services.portfolio.views import normalize_direction

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    tags=["Portfolio"],
)


# =============================================================================
# MAPPER FUNCTIONS (Internal Types -> Pydantic Schemas)
# =============================================================================

def _money(value: Decimal | None, currency: str, locale: str) -> str | None:
    return None if value is None else format_currency(value, currency, locale)


def _map_holding(holding: Holding, weight: Decimal, currency: str, locale: str) -> HoldingResponse:
    """Map internal Holding to Pydantic schema."""
    return HoldingResponse(
        name=holding.name,
        isin=holding.isin,
        ticker=holding.ticker,
        asset_type=holding.asset_type,
        quantity=holding.quantity,
        unit_price=holding.unit_price,
        total_value=holding.total_value,
        current_price=holding.current_price,
        current_total_value=holding.current_total_value,
        price_change=holding.price_change,
        percent_change=holding.percent_change,
        weight=weight,
        display=HoldingDisplay(
            quantity=format_quantity(holding.quantity),
            unit_price=format_currency(holding.unit_price, currency, locale),
            total_value=format_currency(holding.total_value, currency, locale),
            current_price=_money(holding.current_price, currency, locale),
            current_total_value=_money(holding.current_total_value, currency, locale),
            price_change=_money(holding.price_change, currency, locale),
            percent_change=(
                None if holding.percent_change is None
                else format_percentage(holding.percent_change)
            ),
            weight=format_percentage(weight),
        ),
    )


def _map_totals(totals: PortfolioTotals, currency: str, locale: str) -> PortfolioTotalsResponse:
    """Map internal PortfolioTotals to Pydantic schema."""
    return PortfolioTotalsResponse(
        cost_basis=totals.cost_basis,
        current_value=totals.current_value,
        profit_loss=ProfitLossResponse(
            amount=totals.profit_loss.amount,
            percentage=totals.profit_loss.percentage,
        ),
        quoted_holdings=totals.quoted_holdings,
        total_holdings=totals.total_holdings,
        has_complete_quotes=totals.has_complete_quotes,
        display=TotalsDisplay(
            cost_basis=format_currency(totals.cost_basis, currency, locale),
            current_value=format_currency(totals.current_value, currency, locale),
            profit_loss_amount=format_currency(totals.profit_loss.amount, currency, locale),
            profit_loss_percentage=format_percentage(totals.profit_loss.percentage),
        ),
    )


def _map_snapshot(
        snapshot: PortfolioSnapshot,
        client_id: str | None,
        asset_type: str | None,
        sort_by: str | None,
        direction: str,
        currency: str,
) -> PortfolioResponse:
    """Map internal PortfolioSnapshot to Pydantic schema."""
    locale = settings.display_locale

    return PortfolioResponse(
        client_id=client_id,
        currency=currency,
        locale=locale,
        asset_type=asset_type or ALL_TYPES,
        asset_types=snapshot.asset_types,
        sort_by=sort_by or None,
        direction=normalize_direction(direction),
        holdings=[
            _map_holding(h, snapshot.weights.get(h.identity_key, Decimal("0")), currency, locale)
            for h in snapshot.view
        ],
        totals=_map_totals(snapshot.totals, currency, locale),
        warnings=snapshot.warnings,
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get(
    "/clients/{client_id}/portfolio",
    response_model=PortfolioResponse,
    summary="Get a client's portfolio",
    response_description="Holdings with live quotes, totals and filter options",
)
@limiter.limit(RATE_LIMIT_PORTFOLIO)
def get_portfolio(
        request: Request,  # Required for rate limiting
        client_id: str,
        asset_type: str | None = Query(
            default=None,
            description="Show only this instrument type ('All' or omitted for every type)",
        ),
        sort_by: str | None = Query(
            default=None,
            description="Sort field, e.g. name, total_value, percent_change (omitted keeps first-seen order)",
        ),
        direction: str = Query(
            default="asc",
            description="Sort direction: asc or desc",
        ),
        service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    """
    Load a client's transactions, aggregate them into holdings and value
    them with the latest quotes.

    Holdings without a quote are shown at cost basis with null market
    fields. If the quote provider is down the portfolio is still returned
    (at cost basis) with a warning.

    Raises **404** if the client is unknown, **400** for an invalid sort
    field or direction, **502** if the statement backend fails.
    """
    snapshot = service.get_portfolio(
        client_id,
        asset_type=asset_type,
        sort_by=sort_by,
        direction=direction,
    )

    return _map_snapshot(
        snapshot,
        client_id=client_id,
        asset_type=asset_type,
        sort_by=sort_by,
        direction=direction,
        currency=settings.display_currency,
    )


@router.post(
    "/portfolio/valuation",
    response_model=PortfolioResponse,
    summary="Value posted transactions",
    response_description="Holdings valued with the posted quotes",
)
@limiter.limit(RATE_LIMIT_VALUATION)
def value_portfolio(
        request: Request,  # Required for rate limiting
        payload: ValuationRequest,
        service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioResponse:
    """
    Aggregate and value the posted transactions against the posted quotes.

    No upstream service is called. `quotes` may be a flat
    `{"AAPL": 170.5}` mapping, `{"AAPL": {"close": 170.5}}` or a list of
    `{"symbol": "AAPL", "close": 170.5}` objects; unusable entries are
    ignored.
    """
    snapshot = service.value_transactions(
        [t.to_record() for t in payload.transactions],
        normalize_quotes(payload.quotes),
        asset_type=payload.asset_type,
        sort_by=payload.sort_by,
        direction=payload.direction,
    )

    return _map_snapshot(
        snapshot,
        client_id=None,
        asset_type=payload.asset_type,
        sort_by=payload.sort_by,
        direction=payload.direction,
        currency=payload.currency or settings.display_currency,
    )
