from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from statement_engine.settings import APP_NAME, APP_VERSION
from webapp.routers import statements

app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
app.include_router(statements.router)


@app.get("/", include_in_schema=False)
def home() -> Any:
    # default route
    return RedirectResponse(url="/docs")


@app.get("/api/health")
def api_health() -> Any:
    return {"status": "ok", "app": APP_NAME, "version": APP_VERSION}
