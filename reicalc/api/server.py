"""FastAPI service exposing the calculators over JSON."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, TypeAdapter

from reicalc.analysis.engine import (
    SESSIONS,
    CalculatorSession,
    ComparisonSession,
    FinancingSession,
    FlipSession,
    MAOSession,
    get_session,
    reset_all_saved,
)
from reicalc.analysis.loan import LoanAnalyzer
from reicalc.config import AppConfig
from reicalc.db.repository import InputStore, Repository
from reicalc.errors import InvalidInput
from reicalc.models import (
    ComparisonInputs,
    FinancingInputs,
    FlipInputs,
    LoanInputs,
    MAOInputs,
    PropertyInputs,
)


_ANY = TypeAdapter(Any)


class FinancingRequest(BaseModel):
    property: PropertyInputs = PropertyInputs()
    financing: FinancingInputs = FinancingInputs()


def _json(payload: Any) -> Response:
    # pydantic writes inf/nan as null where the stdlib encoder would reject them
    return Response(content=_ANY.dump_json(payload), media_type="application/json")


def create_app(cfg: AppConfig, store: InputStore | None = None) -> FastAPI:
    app = FastAPI(title="REICalc", version="0.1.0")
    repo = store or Repository(cfg.storage.url)

    def _open(name: str) -> CalculatorSession:
        try:
            session_cls = get_session(name)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return session_cls(repo, cfg.defaults)

    def _run(session: CalculatorSession) -> Response:
        results = session.calculate()
        if results is None:
            raise HTTPException(status_code=400, detail=session.error)
        return _json(results)

    def _state(session: CalculatorSession) -> dict:
        state = {"inputs": session.inputs, "results": session.results}
        if isinstance(session, FinancingSession):
            state["property_inputs"] = session.property_inputs
        return state

    @app.post("/api/financing")
    async def financing(body: FinancingRequest):
        """Rental financing: payment, expenses, cash flow, cap rate, cash-on-cash."""
        session = FinancingSession(repo, cfg.defaults)
        session.property_inputs = body.property
        session.inputs = body.financing
        return _run(session)

    @app.post("/api/loan")
    async def loan(body: LoanInputs):
        """Loan-cost analysis. Not persisted."""
        try:
            return _json(LoanAnalyzer().evaluate(body))
        except InvalidInput as e:
            raise HTTPException(status_code=400, detail=e.message)

    @app.post("/api/flip")
    async def flip(body: FlipInputs):
        session = FlipSession(repo, cfg.defaults)
        session.inputs = body
        return _run(session)

    @app.post("/api/mao")
    async def mao(body: MAOInputs):
        session = MAOSession(repo, cfg.defaults)
        session.inputs = body
        return _run(session)

    @app.post("/api/comparison")
    async def comparison(body: ComparisonInputs):
        session = ComparisonSession(repo, cfg.defaults)
        session.inputs = body
        return _run(session)

    @app.get("/api/{calculator}/inputs")
    async def saved_inputs(calculator: str):
        """Last saved inputs for a calculator, or its defaults."""
        return _json(_state(_open(calculator)))

    @app.post("/api/{calculator}/reset")
    async def reset(calculator: str):
        session = _open(calculator)
        session.reset()
        return _json(_state(session))

    @app.delete("/api/saved-inputs")
    async def clear_saved_inputs():
        """Forget saved inputs for all calculators."""
        reset_all_saved(repo)
        return {"cleared": [key.value for cls in SESSIONS.values() for key in cls.STORAGE_KEYS]}

    @app.get("/api/config")
    async def get_config():
        """Return current configuration."""
        return cfg.model_dump()

    return app
