"""
Adapter: LineReader
Czytanie linii z terminala z historią (stdlib readline, jeśli dostępny).

Bez readline (np. Windows) czytanie działa, tylko bez historii i edycji linii.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

try:
    import readline

    _HAS_READLINE = True
except ImportError:
    _HAS_READLINE = False

logger = logging.getLogger("vinlisp.history")


class LineReader:
    def __init__(
        self,
        prompt: str = "vinlisp> ",
        history_file: str | None = None,
        history_length: int = 1000,
    ) -> None:
        self.prompt = prompt
        self._history_path = (
            Path(os.path.expanduser(history_file)) if history_file else None
        )
        self._history_length = history_length

    @property
    def has_history(self) -> bool:
        return _HAS_READLINE

    def load_history(self) -> None:
        if not _HAS_READLINE:
            return
        readline.set_history_length(self._history_length)
        if self._history_path is None or not self._history_path.exists():
            return
        try:
            readline.read_history_file(str(self._history_path))
        except OSError as exc:
            logger.warning("Cannot read history file %s: %s", self._history_path, exc)

    def save_history(self) -> None:
        if not _HAS_READLINE or self._history_path is None:
            return
        try:
            readline.write_history_file(str(self._history_path))
        except OSError as exc:
            logger.warning("Cannot write history file %s: %s", self._history_path, exc)

    def read_line(self) -> str | None:
        """Zwraca linię bez końcowego '\\n' albo None na EOF."""
        try:
            return input(self.prompt)
        except EOFError:
            return None
