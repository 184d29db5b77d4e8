"""
Settlement calculation routes.
"""
from fastapi import APIRouter, HTTPException, status
import logging

from tripsettle.core.config import settings
from tripsettle.core.exceptions import SettlementError
from tripsettle.schemas.settlement import SettlementRequest, SettlementResponse
from tripsettle.services.settlement_service import calculate_settlement

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settlement", tags=["settlement"])


@router.post("/calculate", response_model=SettlementResponse)
async def calculate(request: SettlementRequest):
    """Calculate balances and transfers for the submitted expenses.

    Nothing is stored; the same request always yields the same result.
    """
    try:
        result = calculate_settlement(
            request.expenses,
            request.settlement_currency,
            request.rates,
            epsilon=settings.SETTLEMENT_EPSILON_MINOR,
            include_settled=request.include_settled,
        )
    except SettlementError as e:
        logger.warning(f"Settlement rejected: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return SettlementResponse.model_validate(result)
