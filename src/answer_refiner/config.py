"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


def _check_range(name: str, value, low=None, high=None) -> None:
    if low is not None and value < low:
        raise ValueError(f"{name} must be >= {low}, got {value}")
    if high is not None and value > high:
        raise ValueError(f"{name} must be <= {high}, got {value}")


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    temperature: float = 0.7
    max_tokens: int = 1024
    timeout: int = 60
    max_retries: int = 1  # attempts; 1 means the provider call is not retried

    def __post_init__(self) -> None:
        _check_range("temperature", self.temperature, 0.0, 1.0)
        _check_range("max_tokens", self.max_tokens, 1)
        _check_range("timeout", self.timeout, 1, 600)
        _check_range("max_retries", self.max_retries, 1, 10)


@dataclass(frozen=True)
class SupabaseConfig:
    url_env: str = "SUPABASE_URL"
    service_key_env: str = "SUPABASE_SERVICE_ROLE_KEY"
    profile_table: str = "user_profiles"
    subscription_table: str = "subscriptions"
    timeout: float = 10.0

    def __post_init__(self) -> None:
        _check_range("supabase timeout", self.timeout, 0.1, 120)


@dataclass(frozen=True)
class RefinerConfig:
    context_max_chars: int = 4000
    require_pro: bool = False

    def __post_init__(self) -> None:
        _check_range("context_max_chars", self.context_max_chars, 200)


@dataclass(frozen=True)
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        _check_range("port", self.port, 1, 65535)


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    supabase: SupabaseConfig = field(default_factory=SupabaseConfig)
    refiner: RefinerConfig = field(default_factory=RefinerConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        supabase=SupabaseConfig(**raw.get("supabase", {})),
        refiner=RefinerConfig(**raw.get("refiner", {})),
        server=ServerConfig(**raw.get("server", {})),
    )
