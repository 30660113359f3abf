"""FastAPI service exposing transforms, combinations and rolling correlation."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Literal, Optional

from fastapi import Body, FastAPI, HTTPException

from . import __version__
from .capability import capability_report, online_capable
from .errors import SequenceEngineError
from .models.params import make_params
from .operators import CombineOp, Operator, describe_operator, parse_operator
from .pipeline import run_combine, run_corr_window, run_transform


def _bad_request(exc: SequenceEngineError) -> HTTPException:
    return HTTPException(status_code=400, detail=exc.as_dict())


def create_app() -> FastAPI:
    app = FastAPI(title="Sequence Engine API", version=__version__)

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/version")
    def version() -> Dict[str, str]:
        return {"version": __version__}

    @app.get("/operators")
    def operators() -> Dict[str, Any]:
        return {
            "operators": [describe_operator(op) for op in Operator],
            "combinations": [op.value for op in CombineOp],
        }

    @app.get("/capable")
    def capable(operator: Optional[str] = None, finite: bool = False) -> Dict[str, Any]:
        if operator is None:
            return {"operators": capability_report()}
        try:
            op = parse_operator(operator)
        except SequenceEngineError as exc:
            raise _bad_request(exc)
        return {
            "operator": op.value,
            "finite": finite,
            "online": online_capable(op, assume_unbounded_input=not finite),
        }

    @app.post("/transform")
    def transform(
        operator: str = Body(...),
        samples: List[float] = Body(...),
        main: int = Body(0),
        fill: float = Body(0.0),
        mode: Literal["finite", "stream"] = Body("finite"),
    ) -> Dict[str, Any]:
        try:
            params = make_params(operator, main, fill)
            return run_transform(params, samples, mode).as_dict()
        except SequenceEngineError as exc:
            raise _bad_request(exc)

    @app.post("/combine")
    def combine(
        operator: str = Body(...),
        a: List[float] = Body(...),
        b: List[float] = Body(...),
    ) -> Dict[str, Any]:
        try:
            return run_combine(operator, a, b).as_dict()
        except SequenceEngineError as exc:
            raise _bad_request(exc)

    @app.post("/corr-window")
    def corr_window(
        window: int = Body(..., gt=0),
        a: List[float] = Body(...),
        b: List[float] = Body(...),
    ) -> Dict[str, Any]:
        if len(a) != len(b):
            raise HTTPException(
                status_code=400,
                detail={"kind": "argument", "detail": "a and b must have the same length"},
            )
        try:
            coefficients = run_corr_window(zip(a, b), window)
        except SequenceEngineError as exc:
            raise _bad_request(exc)
        # JSON has no NaN; undefined coefficients are reported as null.
        return {
            "window": window,
            "coefficients": [None if math.isnan(c) else c for c in coefficients],
        }

    return app
