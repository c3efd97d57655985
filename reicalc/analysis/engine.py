"""Calculator sessions that own inputs, results and persistence for one calculator.

A session stands where an interactive front end keeps its per-screen state:
it loads the last saved inputs once, lets the caller edit them, runs the
analyzer on demand, and saves the inputs after every successful run. The
analyzers themselves stay pure.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel

from reicalc.analysis.comparison import ComparisonAnalyzer
from reicalc.analysis.financing import FinancingAnalyzer
from reicalc.analysis.flip import FlipAnalyzer
from reicalc.analysis.mao import MAOAnalyzer
from reicalc.config import DefaultsConfig
from reicalc.db.repository import InputStore
from reicalc.errors import InvalidInput
from reicalc.models import (
    CalculatorKind,
    ComparisonInputs,
    ComparisonResults,
    FinancingInputs,
    FinancingResults,
    FlipInputs,
    FlipResults,
    MAOInputs,
    MAOResults,
    PropertyInputs,
    StorageKey,
    revise,
)

logger = logging.getLogger(__name__)

InputsT = TypeVar("InputsT", bound=BaseModel)
ResultsT = TypeVar("ResultsT", bound=BaseModel)

Listener = Callable[["CalculatorSession"], None]


class CalculatorSession(ABC, Generic[InputsT, ResultsT]):
    """State holder for a single calculator."""

    KIND: CalculatorKind
    STORAGE_KEYS: tuple[StorageKey, ...] = ()

    def __init__(self, store: InputStore, defaults: DefaultsConfig | None = None):
        self.store = store
        self.defaults = defaults or DefaultsConfig()
        self.inputs: InputsT = self._load_inputs()
        self.results: ResultsT = self._empty_results()
        self.error: str | None = None
        self._listeners: list[Listener] = []

    @abstractmethod
    def _default_inputs(self) -> InputsT:
        ...

    @abstractmethod
    def _empty_results(self) -> ResultsT:
        ...

    @abstractmethod
    def _evaluate(self, inputs: InputsT) -> ResultsT:
        ...

    def _load_inputs(self) -> InputsT:
        default = self._default_inputs()
        saved = self.store.load(self.STORAGE_KEYS[0], type(default))
        return saved if saved is not None else default

    def _save_inputs(self) -> None:
        self.store.save(self.STORAGE_KEYS[0], self.inputs)

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener(session)`` after every calculate or reset."""
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self)

    def update(self, **fields: Any) -> InputsT:
        """Replace the current inputs with a copy that has ``fields`` changed.

        Raises ``pydantic.ValidationError`` and keeps the current inputs when
        a field is out of range.
        """
        self.inputs = revise(self.inputs, **fields)
        return self.inputs

    def calculate(self) -> ResultsT | None:
        """Evaluate the current inputs.

        Returns the fresh results, or None when the inputs are invalid. On
        failure the previous results are kept and only ``error`` changes.
        """
        try:
            results = self._evaluate(self.inputs)
        except InvalidInput as e:
            logger.debug("%s inputs rejected: %s", self.KIND.value, e.message)
            self.error = e.message
            self._notify()
            return None

        self.results = results
        self.error = None
        self._save_inputs()
        self._notify()
        return results

    def reset(self) -> tuple[InputsT, ResultsT]:
        """Return to default inputs and empty results, and save the defaults."""
        self.inputs = self._default_inputs()
        self.results = self._empty_results()
        self.error = None
        self._save_inputs()
        self._notify()
        return self.inputs, self.results


class FinancingSession(CalculatorSession[FinancingInputs, FinancingResults]):
    """Rental financing calculator.

    Its inputs come in two parts saved under separate keys; ``inputs`` is
    the loan terms and ``property_inputs`` the property figures.
    """

    KIND = CalculatorKind.FINANCING
    STORAGE_KEYS = (StorageKey.FINANCING_PROPERTY, StorageKey.FINANCING_TERMS)

    def __init__(self, store: InputStore, defaults: DefaultsConfig | None = None):
        self.analyzer = FinancingAnalyzer()
        defaults = defaults or DefaultsConfig()
        saved = store.load(StorageKey.FINANCING_PROPERTY, PropertyInputs)
        self.property_inputs: PropertyInputs = saved if saved is not None else defaults.property
        super().__init__(store, defaults)

    def _default_inputs(self) -> FinancingInputs:
        return self.defaults.financing

    def _empty_results(self) -> FinancingResults:
        return FinancingResults()

    def _load_inputs(self) -> FinancingInputs:
        saved = self.store.load(StorageKey.FINANCING_TERMS, FinancingInputs)
        return saved if saved is not None else self._default_inputs()

    def _save_inputs(self) -> None:
        self.store.save(StorageKey.FINANCING_PROPERTY, self.property_inputs)
        self.store.save(StorageKey.FINANCING_TERMS, self.inputs)

    def _evaluate(self, inputs: FinancingInputs) -> FinancingResults:
        return self.analyzer.evaluate(self.property_inputs, inputs)

    def update_property(self, **fields: Any) -> PropertyInputs:
        self.property_inputs = revise(self.property_inputs, **fields)
        return self.property_inputs

    def reset(self) -> tuple[FinancingInputs, FinancingResults]:
        self.property_inputs = self.defaults.property
        return super().reset()


class FlipSession(CalculatorSession[FlipInputs, FlipResults]):
    KIND = CalculatorKind.FLIP
    STORAGE_KEYS = (StorageKey.FLIP,)

    def __init__(self, store: InputStore, defaults: DefaultsConfig | None = None):
        self.analyzer = FlipAnalyzer()
        super().__init__(store, defaults)

    def _default_inputs(self) -> FlipInputs:
        return self.defaults.flip

    def _empty_results(self) -> FlipResults:
        return FlipResults()

    def _evaluate(self, inputs: FlipInputs) -> FlipResults:
        return self.analyzer.evaluate(inputs)


class MAOSession(CalculatorSession[MAOInputs, MAOResults]):
    KIND = CalculatorKind.MAO
    STORAGE_KEYS = (StorageKey.MAO,)

    def __init__(self, store: InputStore, defaults: DefaultsConfig | None = None):
        self.analyzer = MAOAnalyzer()
        super().__init__(store, defaults)

    def _default_inputs(self) -> MAOInputs:
        return self.defaults.mao

    def _empty_results(self) -> MAOResults:
        return MAOResults()

    def _evaluate(self, inputs: MAOInputs) -> MAOResults:
        return self.analyzer.evaluate(inputs)


class ComparisonSession(CalculatorSession[ComparisonInputs, ComparisonResults]):
    KIND = CalculatorKind.COMPARISON
    STORAGE_KEYS = (StorageKey.COMPARISON,)

    def __init__(self, store: InputStore, defaults: DefaultsConfig | None = None):
        self.analyzer = ComparisonAnalyzer()
        super().__init__(store, defaults)

    def _default_inputs(self) -> ComparisonInputs:
        return self.defaults.comparison

    def _empty_results(self) -> ComparisonResults:
        return ComparisonResults()

    def _evaluate(self, inputs: ComparisonInputs) -> ComparisonResults:
        return self.analyzer.evaluate(inputs)


SESSIONS: dict[str, type[CalculatorSession]] = {
    CalculatorKind.FINANCING.value: FinancingSession,
    CalculatorKind.FLIP.value: FlipSession,
    CalculatorKind.MAO.value: MAOSession,
    CalculatorKind.COMPARISON.value: ComparisonSession,
}


def get_session(name: str) -> type[CalculatorSession]:
    """Get a session class by calculator name."""
    if name not in SESSIONS:
        raise ValueError(f"Unknown calculator: {name}. Available: {list(SESSIONS.keys())}")
    return SESSIONS[name]


def reset_all_saved(store: InputStore) -> None:
    """Forget the saved inputs of every calculator.

    Sessions that are already open keep their in-memory state.
    """
    keys = [key for cls in SESSIONS.values() for key in cls.STORAGE_KEYS]
    logger.info("Clearing saved inputs for %d keys", len(keys))
    store.clear(keys)
