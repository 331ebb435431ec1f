"""Runtime settings read from the environment (and a ``.env`` file, if any)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from orderedit.domain.exceptions import ValidationError
from orderedit.domain.service.eta_scheduler import DEFAULT_TIMEZONE

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

BACKENDS = ("json", "http")


@dataclass(frozen=True)
class Settings:
    backend: str = "json"
    api_base_url: str | None = None
    api_token: str | None = None
    restaurant_id: str | None = None
    timezone: str = DEFAULT_TIMEZONE
    data_dir: Path = _DEFAULT_DATA_DIR
    http_timeout: float = 30.0
    log_level: str = "INFO"

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ

        backend = env.get("ORDEREDIT_BACKEND", "json").strip().lower()
        if backend not in BACKENDS:
            raise ValidationError(
                f"ORDEREDIT_BACKEND must be one of {', '.join(BACKENDS)}, got '{backend}'"
            )

        api_base_url = env.get("ORDEREDIT_API_BASE_URL") or None
        if backend == "http" and not api_base_url:
            raise ValidationError("ORDEREDIT_API_BASE_URL is required for the http backend")

        raw_timeout = env.get("ORDEREDIT_HTTP_TIMEOUT", "30")
        try:
            http_timeout = float(raw_timeout)
        except ValueError as exc:
            raise ValidationError(f"Invalid ORDEREDIT_HTTP_TIMEOUT: '{raw_timeout}'") from exc

        data_dir = env.get("ORDEREDIT_DATA_DIR")
        return Settings(
            backend=backend,
            api_base_url=api_base_url.rstrip("/") if api_base_url else None,
            api_token=env.get("ORDEREDIT_API_TOKEN") or None,
            restaurant_id=env.get("ORDEREDIT_RESTAURANT_ID") or None,
            timezone=env.get("ORDEREDIT_TIMEZONE", DEFAULT_TIMEZONE),
            data_dir=Path(data_dir) if data_dir else _DEFAULT_DATA_DIR,
            http_timeout=http_timeout,
            log_level=env.get("ORDEREDIT_LOG_LEVEL", "INFO").upper(),
        )


def load_settings() -> Settings:
    load_dotenv()
    return Settings.from_env()
