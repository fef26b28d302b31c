from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from .concern import AckSpec
from .errors import InvalidArgument
from .registry import DEFAULT_REGISTRY


class Settings(BaseModel):
    # Network
    host: str = "0.0.0.0"
    port: int = 8000

    # Write concern applied when a caller does not pick one
    default_write_concern: str = "acknowledged"
    default_wtimeout_ms: int = 0

    # Names both logging and uvicorn accept
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @staticmethod
    def from_env() -> "Settings":
        import os

        host = os.environ.get("HOST", "0.0.0.0").strip()
        port = int(os.environ.get("PORT", "8000"))

        default_write_concern = os.environ.get("DEFAULT_WRITE_CONCERN", "acknowledged").strip().lower()
        default_wtimeout_ms = int(os.environ.get("DEFAULT_WTIMEOUT_MS", "0"))

        log_level = os.environ.get("LOG_LEVEL", "INFO").strip().upper()

        return Settings(
            host=host,
            port=port,
            default_write_concern=default_write_concern,
            default_wtimeout_ms=default_wtimeout_ms,
            log_level=log_level,
        )

    def default_spec(self) -> AckSpec:
        entry = DEFAULT_REGISTRY.entry(self.default_write_concern)
        if entry is None:
            raise InvalidArgument(f"unknown write concern {self.default_write_concern!r}")
        spec = entry.spec
        if self.default_wtimeout_ms != 0:
            spec = spec.with_timeout(self.default_wtimeout_ms)
        return spec
