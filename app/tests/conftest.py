"""
Pytest configuration and fixtures for settlement tests.
"""
import pytest
from typing import Dict, List

from app.schemas.settlement_schema import PersonBalance, Transfer


@pytest.fixture
def sample_expenses():
    """Three expenses where every participant both pays and shares."""
    return [
        {"id": "e1", "paidBy": "A", "amount": 120, "participants": ["A", "B", "C"]},
        {"id": "e2", "paidBy": "B", "amount": 60, "participants": ["B", "C"]},
        {"id": "e3", "paidBy": "C", "amount": 40, "participants": ["A", "C", "D"]},
    ]


@pytest.fixture
def balanced_expenses():
    """Two creditors and two debtors whose totals match exactly."""
    return [
        {"id": "e1", "paidBy": "A", "amount": 100, "participants": ["A", "B", "C", "D"]},
        {"id": "e2", "paidBy": "B", "amount": 40, "participants": ["C", "D"]},
    ]


@pytest.fixture
def participant_names():
    return {"A": "alice", "B": "bob", "C": "carol", "D": "dave"}


def make_balance(person_id: str, net: float) -> PersonBalance:
    return PersonBalance(id=person_id, name=person_id, paid=0.0, share=0.0, net=net)


@pytest.fixture
def balance_factory():
    return make_balance


@pytest.fixture
def verify_transfers_settle_nets():
    """
    Helper to verify transfers drain every nonzero net position.

    Each participant's received minus paid total must equal their original
    net within a cent.
    """
    def _verify(balances: List[PersonBalance], transfers: List[Transfer]) -> None:
        flow: Dict[str, float] = {}
        for transfer in transfers:
            flow[transfer.to_user_id] = flow.get(transfer.to_user_id, 0.0) + transfer.amount
            flow[transfer.from_user_id] = flow.get(transfer.from_user_id, 0.0) - transfer.amount

        for balance in balances:
            if balance.net == 0:
                continue
            received = flow.get(balance.id, 0.0)
            assert abs(received - balance.net) <= 0.01 + 1e-9, \
                f"User {balance.id} not settled: net={balance.net}, received={received}"

    return _verify
