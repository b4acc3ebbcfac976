from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from orbit_server.api import router as api_router
from orbit_sim.rules.ruleset import load_default_ruleset


@asynccontextmanager
async def lifespan(app: FastAPI):
    # rules are parsed once, before the first request
    load_default_ruleset()
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Orbit Sim", lifespan=lifespan)
    app.include_router(api_router)
    return app


app = create_app()
