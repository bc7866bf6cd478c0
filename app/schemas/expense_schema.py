from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List


class ExpenseRecord(BaseModel):
    """One expense as supplied by the trip's expense store."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    paid_by: str = Field(..., min_length=1, alias="paidBy")
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    participants: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    trip_id: Optional[str] = Field(None, alias="tripId")

    @field_validator("participants", mode="before")
    @classmethod
    def default_missing_participants(cls, value):
        if value is None:
            return []
        return value

    @field_validator("participants")
    @classmethod
    def reject_duplicate_participants(cls, value: List[str]) -> List[str]:
        seen = set()
        duplicates = [p for p in value if p in seen or seen.add(p)]
        if duplicates:
            raise ValueError(f"Duplicate participants would double-count a share: {duplicates}")
        return value


class TripParticipants(BaseModel):
    """The trip document's parallel id / username arrays."""
    participants: List[str] = []
    participant_usernames: List[str] = Field(default_factory=list, alias="participantUsernames")

    model_config = ConfigDict(populate_by_name=True)
