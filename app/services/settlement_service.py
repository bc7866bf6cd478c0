import logging
from typing import Any, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from app.core.config import settings
from app.core.exceptions import InvalidExpenseError
from app.schemas.expense_schema import ExpenseRecord, TripParticipants
from app.schemas.settlement_schema import SettlementReport
from app.services.participant_lookup import merge_name_lookups
from app.utils.greedy_settlement import compute_settlement, validate_zero_sum

logger = logging.getLogger(__name__)


def validate_expenses(
    expenses: Sequence[Union[ExpenseRecord, Mapping[str, Any]]],
    trip_id: Optional[str] = None
) -> List[ExpenseRecord]:
    """
    Validate raw expense records before they reach the settlement engine.

    Args:
        expenses: Expense documents as returned by the expense store
        trip_id: When given, records carrying a different trip id are rejected

    Returns:
        List of ExpenseRecord in input order

    Raises:
        InvalidExpenseError: On the first record that is malformed (negative or
            non-finite amount, missing payer, duplicate participants) or that
            belongs to another trip
    """
    records = []
    for index, expense in enumerate(expenses):
        if isinstance(expense, ExpenseRecord):
            record = expense
        else:
            try:
                record = ExpenseRecord.model_validate(expense)
            except ValidationError as e:
                raise InvalidExpenseError(
                    f"Expense at index {index} is invalid: {e.error_count()} error(s)",
                    index=index,
                    errors=e.errors(include_url=False, include_context=False, include_input=False)
                ) from e

        if trip_id is not None and record.trip_id is not None and record.trip_id != trip_id:
            raise InvalidExpenseError(
                f"Expense {record.id} belongs to trip {record.trip_id}, not {trip_id}",
                index=index
            )
        records.append(record)
    return records


def calculate_trip_settlement(
    trip_id: str,
    expenses: Sequence[Union[ExpenseRecord, Mapping[str, Any]]],
    participant_names: Optional[Mapping[str, str]] = None,
    trip: Optional[TripParticipants] = None
) -> SettlementReport:
    """
    Validate a trip's expenses and compute its settlement report.

    Display names come from the trip document's participant arrays, with
    ``participant_names`` taking precedence. Unbalanced input is logged but
    never raised: the report still carries every transfer the greedy pass
    could make, plus the unmatched residuals.
    """
    records = validate_expenses(expenses, trip_id=trip_id)
    names = merge_name_lookups(trip, participant_names)

    report = compute_settlement(records, names)

    try:
        validate_zero_sum(report.balances, tolerance=settings.zero_sum_tolerance)
    except ValueError as e:
        logger.warning(f"Trip {trip_id}: {e}")

    logger.info(
        f"Trip {trip_id}: settled {report.expense_count} expenses "
        f"with {len(report.transfers)} transfers"
    )
    return report
