"""
schemas.py — Request/Response modele FastAPI.
Oddzielone od contracts.py żeby API mogło ewoluować niezależnie.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from contracts import ErrorKind, ProgramNode, SyntaxDiagnostic


# ─────────────────────────── /eval ───────────────────────────────

class EvalRequest(BaseModel):
    line: str = Field(..., max_length=10_000)


class EvalResponse(BaseModel):
    ok: bool                          # False = błąd składni, ewaluator nie był wołany
    value: Optional[int] = None
    error: Optional[ErrorKind] = None
    rendered: str
    diagnostic: Optional[SyntaxDiagnostic] = None
    steps: list[str] = Field(default_factory=list)


# ─────────────────────────── /parse ──────────────────────────────

class ParseRequest(BaseModel):
    line: str = Field(..., max_length=10_000)


class ParseResponse(BaseModel):
    ok: bool
    tree: Optional[ProgramNode] = None
    diagnostic: Optional[SyntaxDiagnostic] = None


# ─────────────────────────── /health ─────────────────────────────

class HealthResponse(BaseModel):
    status: str
    version: str
