from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from app.schemas.expense_schema import ExpenseRecord, TripParticipants


class PersonBalance(BaseModel):
    id: str
    name: str
    paid: float
    share: float
    net: float


class Transfer(BaseModel):
    from_user_id: str
    to_user_id: str
    from_name: str
    to_name: str
    amount: float = Field(..., ge=0)


class Residual(BaseModel):
    """Net left on a participant after the greedy loop ran out of counterparts."""
    id: str
    name: str
    amount: float


class SettlementReport(BaseModel):
    balances: List[PersonBalance] = []
    transfers: List[Transfer] = []
    trip_total: float = 0.0
    expense_count: int = 0
    residuals: List[Residual] = []
    unsettled_total: float = 0.0


class SettlementRequest(BaseModel):
    expenses: List[ExpenseRecord] = []
    participant_names: Dict[str, str] = {}
    trip_participants: Optional[TripParticipants] = None
