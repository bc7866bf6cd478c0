import logging
from typing import Dict, Mapping, Optional, Sequence

from app.schemas.expense_schema import TripParticipants

logger = logging.getLogger(__name__)


def build_name_lookup(
    participants: Sequence[str],
    participant_usernames: Sequence[str]
) -> Dict[str, str]:
    """
    Build a participant_id -> display name mapping from a trip document.

    Trips store ids and usernames as two parallel arrays. The mapping is
    built once per trip so callers never correlate by position again.
    Ids past the end of the username array, or paired with an empty
    username, are left out and resolve to themselves.
    """
    if len(participant_usernames) != len(participants):
        logger.warning(
            f"Trip has {len(participants)} participants but "
            f"{len(participant_usernames)} usernames; unmatched ids fall back to the id"
        )

    lookup: Dict[str, str] = {}
    for participant_id, username in zip(participants, participant_usernames):
        if username and participant_id not in lookup:
            lookup[participant_id] = username
    return lookup


def merge_name_lookups(
    trip: Optional[TripParticipants] = None,
    overrides: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """Names from the trip document, with explicit overrides taking precedence"""
    lookup: Dict[str, str] = {}
    if trip is not None:
        lookup.update(build_name_lookup(trip.participants, trip.participant_usernames))
    if overrides:
        lookup.update({k: v for k, v in overrides.items() if v})
    return lookup

