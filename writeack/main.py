from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, HTTPException

from .config import Settings
from .errors import InvalidArgument
from .models import AckSpecResponse, DeriveRequest, PresetListResponse
from .registry import DEFAULT_REGISTRY

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    if settings is None:
        settings = Settings.from_env()

    # Only the package logger; handlers are the entry point's business.
    logging.getLogger("writeack").setLevel(settings.log_level)

    # Fail at startup, not on the first request, if the default is misconfigured.
    default_spec = settings.default_spec()
    logger.info("Default write concern %s (%s)", settings.default_write_concern, default_spec)

    # A timeout turns the preset into a different value, which no longer has that name.
    default_base = DEFAULT_REGISTRY.entry(settings.default_write_concern)
    default_name = default_base.name if default_base.spec == default_spec else None

    app = FastAPI(title="writeack")

    @app.get("/health")
    async def health():
        return {"ok": True, "default": default_spec.as_wire_document()}

    @app.get("/default", response_model=AckSpecResponse)
    async def get_default():
        return AckSpecResponse.from_spec(default_spec, name=default_name, base=default_base.name)

    @app.get("/presets", response_model=PresetListResponse)
    async def list_presets():
        return PresetListResponse(
            presets=[
                AckSpecResponse.from_spec(e.spec, name=e.name, replacement=e.replacement)
                for e in DEFAULT_REGISTRY.entries()
            ]
        )

    @app.get("/presets/{name}", response_model=AckSpecResponse)
    async def get_preset(name: str):
        entry = DEFAULT_REGISTRY.entry(name)
        if entry is None:
            raise HTTPException(status_code=404, detail=f"Unknown write concern {name!r}")
        return AckSpecResponse.from_spec(entry.spec, name=entry.name, replacement=entry.replacement)

    @app.post("/derive", response_model=AckSpecResponse)
    async def derive(body: DeriveRequest):
        entry = DEFAULT_REGISTRY.entry(body.base)
        if entry is None:
            raise HTTPException(status_code=404, detail=f"Unknown write concern {body.base!r}")

        try:
            spec = body.apply_to(entry.spec)
        except InvalidArgument as exc:
            logger.warning("Rejected derivation from %s: %s", entry.name, exc)
            raise HTTPException(
                status_code=422,
                detail={
                    "message": str(exc),
                    "base": entry.name,
                },
            ) from exc

        return AckSpecResponse.from_spec(spec, base=entry.name)

    return app


def run() -> None:
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


app = create_app()


if __name__ == "__main__":
    run()
