#!/usr/bin/env python3
"""
vinlisp.py — CLI VinLisp (kalkulator w notacji polskiej).

Konfiguracja: zmienne środowiskowe z prefiksem VINLISP_
lub plik .env (np. VINLISP_INT_BITS=32, VINLISP_OVERFLOW=error).

Podkomendy:
    repl  — interaktywna pętla z historią (domyślna)
    eval  — policz linie z --text lub stdin
    tree  — pokaż drzewo parsowania linii

Użycie:
    python vinlisp.py
    python vinlisp.py repl --tree --steps
    python vinlisp.py eval --text "* 2 (+ 1 2)"
    echo "- 1 2 3" | python vinlisp.py eval --json
    python vinlisp.py tree --text "+ 1 (* 2 3)"
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Iterable

from rich.console import Console

from adapters.shell.history import LineReader
from adapters.shell.rendering import (
    build_rich_tree,
    format_tree,
    render_diagnostic,
    tree_depth,
)
from adapters.shell.session import Session
from config import Settings
from contracts import ErrorValue, LineResult

# -- helpers ---------------------------------------------------------------

_CONSOLE: Console | None = None
_GUIDE_WIDTH = 4   # szerokość jednego poziomu prowadnic rich.tree


def _console() -> Console:
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(highlight=False)
    return _CONSOLE


def _print_result(
    result: LineResult,
    show_tree: bool = False,
    show_steps: bool = False,
) -> None:
    console = _console()
    if show_tree and result.parse.program is not None:
        console.print(format_tree(result.parse.program), markup=False, soft_wrap=True)
    if show_steps and result.result is not None:
        for step in result.result.steps:
            console.print(f"  {step}", markup=False, style="dim")
    if result.parse_failed:
        console.print(result.rendered, markup=False, style="red")
    elif result.result is not None and result.result.is_error:
        console.print(result.rendered, markup=False, style="yellow")
    else:
        console.print(result.rendered, markup=False)


def _line_payload(result: LineResult) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "text": result.text,
        "ok": not result.parse_failed,
        "rendered": result.rendered,
    }
    if result.result is not None:
        value = result.result.value
        if isinstance(value, ErrorValue):
            payload["error"] = value.error.value
        else:
            payload["value"] = value.value
        payload["steps"] = result.result.steps
    if result.parse.error is not None:
        payload["diagnostic"] = result.parse.error.model_dump()
    return payload


def _input_lines(args: argparse.Namespace) -> Iterable[str]:
    """--text (także pusty) albo niepuste linie stdin."""
    if args.text is not None:
        return [args.text]
    return [line for line in sys.stdin.read().splitlines() if line.strip()]


# -- podkomendy ------------------------------------------------------------

def repl(
    session: Session,
    reader: LineReader,
    banner: str,
    show_tree: bool = False,
    show_steps: bool = False,
) -> int:
    """Pętla read-eval-print; kończy się na EOF albo Ctrl-C."""
    console = _console()
    console.print(banner, markup=False)
    console.print("C-c to Exit\n", markup=False)

    reader.load_history()
    try:
        while True:
            line = reader.read_line()
            if line is None:
                console.print()
                break
            _print_result(session.run_line(line), show_tree, show_steps)
    except KeyboardInterrupt:
        console.print()
    finally:
        reader.save_history()
    return 0


def _repl(args: argparse.Namespace, settings: Settings) -> int:
    reader = LineReader(
        prompt=settings.prompt,
        history_file=None if args.no_history else settings.history_file,
        history_length=settings.history_length,
    )
    return repl(
        Session.from_settings(settings),
        reader,
        banner=f"{settings.app_title} Version {settings.app_version}",
        show_tree=args.tree,
        show_steps=args.steps,
    )


def _eval(args: argparse.Namespace, settings: Settings) -> int:
    session = Session.from_settings(settings)
    failed = False
    for line in _input_lines(args):
        result = session.run_line(line)
        failed = failed or result.parse_failed
        if args.json:
            print(json.dumps(_line_payload(result)))
        else:
            _print_result(result, args.tree, args.steps)
    return 1 if failed else 0


def _tree(args: argparse.Namespace, settings: Settings) -> int:
    session = Session.from_settings(settings)
    console = _console()
    failed = False
    for line in _input_lines(args):
        outcome = session.parser.parse(line)
        if outcome.error is not None:
            failed = True
            console.print(render_diagnostic(outcome.error), markup=False, style="red")
            continue
        if tree_depth(outcome.program) * _GUIDE_WIDTH > console.width:
            # prowadnice rich nie zmieszczą się w szerokości terminala
            console.print(format_tree(outcome.program), markup=False, soft_wrap=True)
        else:
            console.print(build_rich_tree(outcome.program))
    return 1 if failed else 0


# -- main ------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="vinlisp",
        description="VinLisp — kalkulator w notacji polskiej",
    )
    sub = parser.add_subparsers(dest="command")

    # repl
    p = sub.add_parser("repl", help="Interaktywna pętla (domyślna)")
    p.add_argument("--tree", action="store_true", help="Pokaż drzewo parsowania")
    p.add_argument("--steps", action="store_true", help="Pokaż kroki obliczeń")
    p.add_argument("--no-history", action="store_true",
                   help="Nie czytaj i nie zapisuj pliku historii")

    # eval
    p = sub.add_parser("eval", help="Policz linie z --text lub stdin")
    p.add_argument("--text", "-t", help="Wyrażenie (lub stdin, linia po linii)")
    p.add_argument("--tree", action="store_true", help="Pokaż drzewo parsowania")
    p.add_argument("--steps", action="store_true", help="Pokaż kroki obliczeń")
    p.add_argument("--json", action="store_true", help="Jeden obiekt JSON na linię")

    # tree
    p = sub.add_parser("tree", help="Pokaż drzewo parsowania")
    p.add_argument("--text", "-t", help="Wyrażenie (lub stdin, linia po linii)")

    args = parser.parse_args(argv)
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())

    if args.command is None:
        args = parser.parse_args(["repl"])

    commands = {
        "repl": _repl,
        "eval": _eval,
        "tree": _tree,
    }
    return commands[args.command](args, settings)


if __name__ == "__main__":
    sys.exit(main())
