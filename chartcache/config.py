"""Load .env and settings.yaml, expose all configuration."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

log = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _load_env() -> None:
    env_path = PROJECT_ROOT / ".env"
    load_dotenv(env_path)


def _load_yaml(settings_path: Path | None = None) -> dict:
    settings_path = settings_path or PROJECT_ROOT / "settings.yaml"
    if settings_path.exists():
        try:
            with open(settings_path) as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError:
            log.warning("Failed to parse %s, using defaults", settings_path.name)
            return {}
    return {}


class Settings(BaseModel):
    # Cache
    default_ttl_ms: int = 5 * 60 * 1000
    sweep_interval: float = 60.0

    # Evaluations API
    api_base_url: str = "http://localhost:3001"
    api_timeout: float = 10.0
    api_token: str = ""

    @field_validator("default_ttl_ms", "sweep_interval")
    @classmethod
    def must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("api_token")
    @classmethod
    def strip_api_token(cls, v: str) -> str:
        return v.strip()


def load_settings(settings_path: Path | None = None) -> Settings:
    _load_env()
    raw = _load_yaml(settings_path)
    raw["api_token"] = os.getenv("CHARTCACHE_API_TOKEN", raw.get("api_token", ""))
    api_url = os.getenv("CHARTCACHE_API_URL")
    if api_url:
        raw["api_base_url"] = api_url
    return Settings(**raw)
