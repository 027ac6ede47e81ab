"""
dependencies.py — zależności routerów VinLisp.
Sesja (parser z limitem zagnieżdżenia + ewaluator) powstaje w lifespan
i trafia do endpointów z Request.app.state.
"""
from __future__ import annotations

from fastapi import Request

from adapters.shell.session import Session
from ports.expression_parser import ExpressionParser


def get_session(request: Request) -> Session:
    return request.app.state.session


def get_parser(request: Request) -> ExpressionParser:
    """Parser sesji; /parse nie potrzebuje ewaluatora."""
    return request.app.state.session.parser
