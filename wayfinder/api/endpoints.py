"""API endpoints for the Wayfinder route optimizer."""

import asyncio
import os

import structlog
from fastapi import APIRouter, Depends

from wayfinder.models.quote import HopBreakdown, QuoteRequest, QuoteResponse
from wayfinder.wayfinder import QuoteOutcome, Wayfinder, get_default_wayfinder

logger = structlog.get_logger()

router = APIRouter()

# Wall-clock limit for a single quote request, in seconds (unset = no limit)
# Configurable via environment variable WAYFINDER_REQUEST_TIMEOUT
_timeout_raw = os.environ.get("WAYFINDER_REQUEST_TIMEOUT", "")
REQUEST_TIMEOUT: float | None = float(_timeout_raw) if _timeout_raw.strip() else None


def get_wayfinder() -> Wayfinder:
    """Dependency provider for the Wayfinder instance.

    Override this in tests to inject a mock:
        app.dependency_overrides[get_wayfinder] = lambda: mock_wayfinder
    """
    return get_default_wayfinder()


def _to_response(outcome: QuoteOutcome) -> QuoteResponse:
    if not outcome.is_valid:
        status = outcome.error.value if outcome.error else "internal_error"
        return QuoteResponse(
            status=status,
            error_detail=outcome.error_detail,
            max_hops=outcome.search.max_hops,
        )

    quote = outcome.quote
    result = outcome.route
    assert quote is not None and result is not None

    hops = [
        HopBreakdown(
            pool=hop.pool,
            input_asset=hop.input_token,
            output_asset=hop.output_token,
            amount_in=str(hop.amount_in),
            amount_out=str(hop.amount_out),
            fee=str(hop_fee.fee),
        )
        for hop, hop_fee in zip(result.hops, quote.hop_fees, strict=True)
    ]
    return QuoteResponse(
        status="ok",
        route=result.route,
        amount_in=str(result.amount_in),
        amount_out=str(result.amount_out),
        total_fee=str(quote.total_fee),
        price_impact_pct=f"{quote.price_impact_pct:f}",
        hops=hops,
        exact=result.exact,
        max_hops=outcome.search.max_hops,
    )


@router.post("/quote", response_model_exclude_none=True)
async def quote(
    request: QuoteRequest,
    wayfinder: Wayfinder = Depends(get_wayfinder),
) -> QuoteResponse:
    """Find and quote the best route for a swap.

    Error Handling:
        - Invalid request schema: Returns 422 Validation Error (Pydantic)
        - No route / invalid input / slippage: 200 with the error status
        - Engine exception: Logs error, returns status "internal_error"
        - Request timeout: returns status "timeout"
    """
    logger.info(
        "received_quote_request",
        input_asset=request.input_asset,
        output_asset=request.output_asset,
        amount_in=request.amount_in,
        pool_count=len(request.pools),
        max_hops=request.max_hops,
    )

    def run() -> QuoteOutcome:
        return wayfinder.quote(
            request.to_pools(),
            request.input_asset,
            request.output_asset,
            int(request.amount_in),
            max_hops=request.max_hops,
            min_amount_out=int(request.min_amount_out),
        )

    # The search is CPU-bound; keep it off the event loop
    try:
        loop = asyncio.get_running_loop()
        if REQUEST_TIMEOUT is not None:
            outcome = await asyncio.wait_for(
                loop.run_in_executor(None, run), timeout=REQUEST_TIMEOUT
            )
        else:
            outcome = await loop.run_in_executor(None, run)
    except TimeoutError:
        logger.warning("quote_timeout", timeout_seconds=REQUEST_TIMEOUT)
        return QuoteResponse.failure("timeout", f"no result within {REQUEST_TIMEOUT}s")
    except Exception:
        logger.exception(
            "quote_error",
            input_asset=request.input_asset,
            output_asset=request.output_asset,
        )
        return QuoteResponse.failure("internal_error", "route engine raised an exception")

    response = _to_response(outcome)
    logger.info(
        "returning_quote",
        status=response.status,
        hops=len(response.route),
        amount_out=response.amount_out,
    )
    return response
