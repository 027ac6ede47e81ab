"""
config.py — Konfiguracja aplikacji przez zmienne środowiskowe.
Wszystkie zmienne mają prefiks VINLISP_.
"""
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Arytmetyka (odpowiednik natywnego `long`)
    int_bits: int = Field(default=64, ge=8, le=512)
    overflow: Literal["wrap", "error"] = "wrap"

    # Zagnieżdżenie nawiasów: None = bez limitu (CLI), API serializuje drzewa do JSON
    max_depth: Optional[int] = Field(default=None, ge=1)
    api_max_depth: int = Field(default=100, ge=1)

    # Logging
    log_level: str = "WARNING"

    # REPL
    prompt: str = "vinlisp> "
    history_file: str = "~/.vinlisp_history"
    history_length: int = 1000

    # App
    app_title: str = "VinLisp"
    app_version: str = "0.0.0.0.1"

    model_config = SettingsConfigDict(env_prefix="VINLISP_", env_file=".env", extra="ignore")
