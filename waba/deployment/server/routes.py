"""
waba/deployment/server/routes.py
================================
REST API routes for the WABA-Core server.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Union
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from waba.algebra.registry import available, get_monoid, get_semiring
from waba.catalog import get_example, list_examples
from waba.core.config import DEFAULT_CONFIG
from waba.core.exceptions import InvalidFramework, SolveCancelled, UnknownAlgebra, UnstableFixpoint, WabaError
from waba.core.types import Framework, OptimizeDirection
from waba.engine.solver import solve, with_search
from waba.evaluation.metrics import compute_metrics

logger = logging.getLogger(__name__)

router = APIRouter()

WeightValue = Union[int, float, str]

# ─── Request/Response Models ────────────────────────────────────

class RuleModel(BaseModel):
    id:   Optional[str] = None
    head: str
    body: List[str] = Field(default_factory=list)

class FrameworkModel(BaseModel):
    name:        str = ""
    assumptions: List[str]
    rules:       List[RuleModel] = Field(default_factory=list)
    contraries:  Dict[str, str] = Field(default_factory=dict)     # {"a": "c_a"}
    weights:     Dict[str, WeightValue] = Field(default_factory=dict)  # {"a": 80, "c_a": "#sup"}

class SolveRequest(BaseModel):
    framework:   FrameworkModel
    semiring:    str = "godel"
    monoid:      str = "max"
    semantics:   str = "stable"
    budget:      Optional[WeightValue] = None
    direction:   str = "ub"
    optimize:    str = "none"
    max_results: int = 0
    projection:  bool = False
    metrics:     bool = False
    deadline_s:  Optional[float] = None

class SolveResponse(BaseModel):
    status:       str
    semantics:    str
    semiring:     str
    monoid:       str
    optimal_cost: Any = None
    extensions:   List[Dict[str, Any]]
    stats:        Dict[str, Any]
    metrics:      Optional[Dict[str, Any]] = None

# ─── Helpers ────────────────────────────────────────────────────

def _to_framework(model: FrameworkModel) -> Framework:
    data = model.model_dump()
    return Framework.from_dict(data)

def _error(status: int, exc: WabaError) -> HTTPException:
    return HTTPException(status_code=status, detail={"error": type(exc).__name__, "message": str(exc), **exc.context})

# ─── Routes ─────────────────────────────────────────────────────

@router.post("/solve", response_model=SolveResponse)
def solve_framework(request: SolveRequest):
    limits = DEFAULT_CONFIG.server
    if len(request.framework.assumptions) > limits.max_assumptions:
        raise HTTPException(
            status_code=413,
            detail=f"Framework has {len(request.framework.assumptions)} assumptions; "
                   f"this server accepts at most {limits.max_assumptions}",
        )

    config = with_search(
        DEFAULT_CONFIG,
        projection=request.projection,
        deadline_s=request.deadline_s if request.deadline_s is not None else limits.default_deadline_s,
    )
    try:
        optimize = OptimizeDirection(request.optimize)
        result = solve(
            _to_framework(request.framework),
            request.semiring,
            request.monoid,
            request.semantics,
            budget=request.budget,
            optimize=optimize,
            max_results=request.max_results,
            direction=request.direction,
            config=config,
        )
    except UnknownAlgebra as exc:
        raise _error(400, exc)
    except (InvalidFramework, UnstableFixpoint) as exc:
        raise _error(422, exc)
    except SolveCancelled as exc:
        detail = {
            "error":   "SolveCancelled",
            "message": str(exc),
            "partial": [ext.to_dict() for ext in exc.partial],
        }
        raise HTTPException(status_code=408, detail=detail)
    except WabaError as exc:
        raise _error(400, exc)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    body = result.to_dict()
    if request.metrics:
        body["metrics"] = compute_metrics(
            result.extensions, sorted(request.framework.assumptions), optimize=optimize,
        ).to_dict()
    return SolveResponse(**body)

@router.get("/algebras")
async def list_algebras():
    names = available()
    return {
        "semirings": [get_semiring(n).describe() for n in names["semiring"]],
        "monoids":   [get_monoid(n).describe() for n in names["monoid"]],
        "semantics": names["semantics"],
    }

@router.get("/examples")
async def examples():
    return {"examples": list_examples()}

@router.get("/examples/{name}")
async def example(name: str):
    try:
        return get_example(name).to_dict()
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown example '{name}'")
