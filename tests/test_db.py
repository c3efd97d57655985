"""Tests for the saved-inputs repository."""

from sqlalchemy.exc import OperationalError

from reicalc.db.tables import SavedInputsRow
from reicalc.models import (
    ComparedProperty,
    ComparisonInputs,
    FinancingInputs,
    FlipInputs,
    MAOInputs,
    PropertyInputs,
    StorageKey,
)


def test_load_missing_key(repo):
    assert repo.load(StorageKey.FLIP, FlipInputs) is None


def test_round_trip_every_input_type(repo):
    saved = {
        StorageKey.FINANCING_PROPERTY: PropertyInputs(
            purchase_price=250_000, monthly_rent=2_100, property_tax=3_600, vacancy_rate_percent=7.5
        ),
        StorageKey.FINANCING_TERMS: FinancingInputs(
            down_payment_percent=25, interest_rate_percent=6.25, loan_term_years=15, closing_costs=4_000
        ),
        StorageKey.FLIP: FlipInputs(purchase_price=100_000, repair_costs=20_000, selling_price=160_000),
        StorageKey.MAO: MAOInputs(after_repair_value=150_000, desired_profit=20_000),
        StorageKey.COMPARISON: ComparisonInputs(
            property1=ComparedProperty(name="A", price=150_000, monthly_rent=1_500, monthly_expenses=400),
            property2=ComparedProperty(name="B", price=180_000, monthly_rent=1_700, monthly_expenses=500),
        ),
    }
    for key, inputs in saved.items():
        repo.save(key, inputs)

    for key, inputs in saved.items():
        assert repo.load(key, type(inputs)) == inputs


def test_save_overwrites(repo):
    repo.save(StorageKey.FLIP, FlipInputs(purchase_price=100_000))
    repo.save(StorageKey.FLIP, FlipInputs(purchase_price=120_000))
    assert repo.load(StorageKey.FLIP, FlipInputs).purchase_price == 120_000
    assert repo.saved_keys() == ["flip"]


def test_keys_are_independent(repo):
    repo.save(StorageKey.FLIP, FlipInputs(purchase_price=100_000))
    assert repo.load(StorageKey.MAO, MAOInputs) is None


def test_corrupt_payload_reads_as_absent(repo):
    with repo._session() as session:
        session.add(SavedInputsRow(key="mao", payload="{not json"))
        session.commit()
    assert repo.load(StorageKey.MAO, MAOInputs) is None


def test_wrong_shape_reads_as_absent(repo):
    with repo._session() as session:
        session.add(SavedInputsRow(key="financing-terms", payload='{"loan_term_years": "forever"}'))
        session.commit()
    assert repo.load(StorageKey.FINANCING_TERMS, FinancingInputs) is None


def test_clear(repo):
    repo.save(StorageKey.FLIP, FlipInputs(purchase_price=100_000))
    repo.save(StorageKey.MAO, MAOInputs(after_repair_value=150_000))
    repo.clear([StorageKey.FLIP])
    assert repo.load(StorageKey.FLIP, FlipInputs) is None
    assert repo.load(StorageKey.MAO, MAOInputs) is not None


def test_save_failure_is_swallowed(repo, monkeypatch):
    def broken():
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(repo, "_session", broken)
    repo.save(StorageKey.FLIP, FlipInputs(purchase_price=100_000))
    assert repo.load(StorageKey.FLIP, FlipInputs) is None


def test_saved_keys_failure_reads_as_empty(repo, monkeypatch):
    repo.save(StorageKey.FLIP, FlipInputs(purchase_price=100_000))

    def broken():
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(repo, "_session", broken)
    assert repo.saved_keys() == []
