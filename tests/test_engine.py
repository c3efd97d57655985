"""Tests for calculator sessions."""

import pytest
from pydantic import ValidationError

from reicalc.analysis.engine import (
    SESSIONS,
    ComparisonSession,
    FinancingSession,
    FlipSession,
    MAOSession,
    get_session,
    reset_all_saved,
)
from reicalc.config import DefaultsConfig
from reicalc.db.tables import SavedInputsRow
from reicalc.models import (
    ComparedProperty,
    FinancingInputs,
    FlipInputs,
    FlipResults,
    MAOInputs,
    PropertyInputs,
    StorageKey,
)


class TestFlipSession:
    def test_starts_from_defaults(self, repo):
        session = FlipSession(repo)
        assert session.inputs == FlipInputs()
        assert session.results == FlipResults()
        assert session.error is None

    def test_calculate_saves_inputs(self, repo):
        session = FlipSession(repo)
        session.update(purchase_price=100_000, repair_costs=20_000, holding_costs=5_000,
                       selling_price=160_000, selling_costs=8_000)
        results = session.calculate()
        assert results.profit == 27_000
        assert session.results is results
        assert repo.load(StorageKey.FLIP, FlipInputs) == session.inputs

    def test_saved_inputs_loaded_on_open(self, repo):
        first = FlipSession(repo)
        first.update(purchase_price=90_000, selling_price=150_000)
        first.calculate()

        second = FlipSession(repo)
        assert second.inputs.purchase_price == 90_000
        assert second.inputs.selling_price == 150_000
        # results are never persisted
        assert second.results == FlipResults()

    def test_invalid_inputs_keep_previous_results(self, repo):
        session = FlipSession(repo)
        session.update(purchase_price=100_000, selling_price=150_000)
        good = session.calculate()

        session.update(purchase_price=0)
        assert session.calculate() is None
        assert session.error == "Purchase price must be greater than 0"
        assert session.results == good

    def test_invalid_inputs_not_saved(self, repo):
        session = FlipSession(repo)
        session.update(purchase_price=0, selling_price=150_000)
        session.calculate()
        assert repo.load(StorageKey.FLIP, FlipInputs) is None

    def test_success_clears_error(self, repo):
        session = FlipSession(repo)
        session.calculate()
        assert session.error
        session.update(purchase_price=100_000)
        session.calculate()
        assert session.error is None

    def test_reset(self, repo):
        session = FlipSession(repo)
        session.update(purchase_price=100_000, selling_price=150_000)
        session.calculate()

        inputs, results = session.reset()
        assert inputs == FlipInputs()
        assert results == FlipResults()
        assert repo.load(StorageKey.FLIP, FlipInputs) == FlipInputs()

    def test_listeners_notified(self, repo):
        seen = []
        session = FlipSession(repo)
        session.subscribe(lambda s: seen.append(s.error))
        session.calculate()
        session.update(purchase_price=1)
        session.calculate()
        session.reset()
        assert seen == ["Purchase price must be greater than 0", None, None]


class TestFinancingSession:
    def test_saves_both_parts(self, repo):
        session = FinancingSession(repo)
        session.update_property(purchase_price=200_000, monthly_rent=2_000)
        session.update(down_payment_percent=25)
        assert session.calculate() is not None

        assert repo.load(StorageKey.FINANCING_PROPERTY, PropertyInputs).purchase_price == 200_000
        assert repo.load(StorageKey.FINANCING_TERMS, FinancingInputs).down_payment_percent == 25

    def test_zero_term_rejected_on_update(self, repo):
        session = FinancingSession(repo)
        session.update_property(purchase_price=200_000)
        with pytest.raises(ValidationError):
            session.update(loan_term_years=0)
        assert session.inputs.loan_term_years == 30
        assert session.calculate() is not None

    def test_out_of_range_down_payment_never_saved(self, repo):
        session = FinancingSession(repo)
        session.update_property(purchase_price=200_000)
        with pytest.raises(ValidationError):
            session.update(down_payment_percent=150)
        session.calculate()
        assert repo.load(StorageKey.FINANCING_TERMS, FinancingInputs) == session.inputs
        assert session.inputs.down_payment_percent == 20

    def test_negative_property_figure_rejected(self, repo):
        session = FinancingSession(repo)
        with pytest.raises(ValidationError):
            session.update_property(monthly_rent=-100)
        assert session.property_inputs == PropertyInputs()

    def test_loads_both_parts(self, repo):
        repo.save(StorageKey.FINANCING_PROPERTY, PropertyInputs(purchase_price=300_000))
        repo.save(StorageKey.FINANCING_TERMS, FinancingInputs(loan_term_years=15))
        session = FinancingSession(repo)
        assert session.property_inputs.purchase_price == 300_000
        assert session.inputs.loan_term_years == 15

    def test_corrupt_part_falls_back_to_defaults(self, repo):
        repo.save(StorageKey.FINANCING_PROPERTY, PropertyInputs(purchase_price=300_000))
        repo.save(StorageKey.FINANCING_TERMS, FinancingInputs(loan_term_years=15))
        with repo._session() as s:
            s.get(SavedInputsRow, "financing-terms").payload = "garbage"
            s.commit()
        session = FinancingSession(repo)
        assert session.property_inputs.purchase_price == 300_000
        assert session.inputs == FinancingInputs()

    def test_reset_restores_property_defaults(self, repo):
        session = FinancingSession(repo)
        session.update_property(purchase_price=200_000)
        session.reset()
        assert session.property_inputs == PropertyInputs()

    def test_configured_defaults(self, repo):
        defaults = DefaultsConfig(
            property=PropertyInputs(vacancy_rate_percent=8),
            financing=FinancingInputs(interest_rate_percent=7),
        )
        session = FinancingSession(repo, defaults)
        assert session.property_inputs.vacancy_rate_percent == 8
        assert session.inputs.interest_rate_percent == 7


class TestOtherSessions:
    def test_mao_session(self, repo):
        session = MAOSession(repo)
        session.update(after_repair_value=150_000, repair_costs=25_000, desired_profit=20_000,
                       holding_costs=3_000, selling_costs=9_000)
        assert session.calculate().maximum_allowable_offer == 93_000
        assert MAOSession(repo).inputs.after_repair_value == 150_000

    def test_comparison_session(self, repo):
        session = ComparisonSession(repo)
        session.update(
            property1=ComparedProperty(name="A", price=150_000, monthly_rent=1_500, monthly_expenses=400),
            property2=ComparedProperty(name="B", price=180_000, monthly_rent=1_700, monthly_expenses=500),
        )
        results = session.calculate()
        assert results.property1.monthly_cash_flow == 1_100
        assert ComparisonSession(repo).inputs.property2.name == "B"


class TestRegistry:
    def test_get_session(self):
        assert get_session("flip") is FlipSession
        assert get_session("financing") is FinancingSession

    def test_unknown_session(self):
        with pytest.raises(ValueError, match="Unknown calculator"):
            get_session("brrr")

    def test_storage_keys_are_distinct(self):
        keys = [k for cls in SESSIONS.values() for k in cls.STORAGE_KEYS]
        assert len(keys) == len(set(keys)) == len(StorageKey)


def test_reset_all_saved_clears_every_key(repo):
    flip = FlipSession(repo)
    flip.update(purchase_price=100_000)
    flip.calculate()
    mao = MAOSession(repo)
    mao.update(after_repair_value=150_000)
    mao.calculate()
    financing = FinancingSession(repo)
    financing.update_property(purchase_price=200_000)
    financing.calculate()

    reset_all_saved(repo)

    assert repo.saved_keys() == []
    # open sessions are untouched
    assert flip.inputs.purchase_price == 100_000
    assert FlipSession(repo).inputs == FlipInputs()
    assert MAOSession(repo).inputs == MAOInputs()
