from fastapi import APIRouter, HTTPException
from app.core.exceptions import InvalidExpenseError
from app.services.settlement_service import calculate_trip_settlement
from app.schemas.settlement_schema import SettlementReport, SettlementRequest

router = APIRouter(prefix="/settlements", tags=["settlements"])


@router.post("/trips/{trip_id}", response_model=SettlementReport)
def create_trip_settlement(trip_id: str, request: SettlementRequest):
    """Compute balances and suggested transfers for a trip's expenses"""
    try:
        return calculate_trip_settlement(
            trip_id,
            request.expenses,
            participant_names=request.participant_names,
            trip=request.trip_participants
        )
    except InvalidExpenseError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": str(e), "index": e.index, "errors": e.errors}
        )
