import pytest

from settleup.core.exceptions import ValidationError
from settleup.models.expense import Expense
from settleup.models.ledger import Edge, EdgeStatus
from settleup.services.balances import apply_payments, compute_balances, validate_expense


def make_expense(title, total_cents, paid_by, splits):
    return Expense(group_id="g1", title=title, total_cents=total_cents, paid_by=paid_by, splits=splits)


def test_payer_credited_total_minus_own_share():
    dinner = make_expense("Dinner", 6000, "alice", {"alice": 2000, "bob": 2000, "carol": 2000})

    balances = compute_balances([dinner])

    assert balances == {"alice": 4000, "bob": -2000, "carol": -2000}


def test_balances_accumulate_across_expenses():
    dinner = make_expense("Dinner", 6000, "alice", {"alice": 2000, "bob": 2000, "carol": 2000})
    cab = make_expense("Cab", 3000, "bob", {"alice": 1000, "bob": 1000, "carol": 1000})

    balances = compute_balances([dinner, cab])

    assert balances == {"alice": 3000, "bob": 0, "carol": -3000}
    assert compute_balances([cab, dinner]) == balances


def test_payer_absorbs_rounding_cent():
    # 100.00 split three ways as 33.33 each leaves one cent unassigned
    pizza = make_expense("Pizza", 10000, "alice", {"alice": 3333, "bob": 3333, "carol": 3333})

    balances = compute_balances([pizza])

    assert balances == {"alice": 6666, "bob": -3333, "carol": -3333}
    assert sum(balances.values()) == 0


def test_payer_outside_the_split():
    gift = make_expense("Gift", 5000, "dave", {"alice": 2500, "bob": 2500})

    assert compute_balances([gift]) == {"dave": 5000, "alice": -2500, "bob": -2500}


def test_no_expenses_no_balances():
    assert compute_balances([]) == {}


def test_apply_payments_nets_out_resolved_edges():
    balances = {"alice": 3000, "bob": 0, "carol": -3000}
    paid = Edge(debtor_id="carol", creditor_id="alice", amount_cents=3000, status=EdgeStatus.RESOLVED)

    assert apply_payments(balances, [paid]) == {"alice": 0, "bob": 0, "carol": 0}
    # Input mapping is left untouched
    assert balances["alice"] == 3000


class TestValidateExpense:

    def test_accepts_exact_split(self):
        validate_expense("Dinner", 6000, {"a": 2000, "b": 2000, "c": 2000})

    def test_accepts_one_cent_difference(self):
        validate_expense("Pizza", 10000, {"a": 3333, "b": 3333, "c": 3333})

    def test_rejects_split_sum_mismatch(self):
        with pytest.raises(ValidationError, match="splits sum to 50.00"):
            validate_expense("Dinner", 6000, {"a": 2500, "b": 2500})

    def test_rejects_non_positive_total(self):
        with pytest.raises(ValidationError):
            validate_expense("Free", 0, {"a": 0})

    def test_rejects_negative_split(self):
        with pytest.raises(ValidationError, match="negative split"):
            validate_expense("Odd", 1000, {"a": 1500, "b": -500})

    def test_rejects_empty_splits(self):
        with pytest.raises(ValidationError, match="no splits"):
            validate_expense("Lonely", 1000, {})

    def test_rejects_blank_title(self):
        with pytest.raises(ValidationError, match="title"):
            validate_expense("   ", 1000, {"a": 1000})
