"""
waba/deployment/server/app.py
=============================
FastAPI server for WABA-Core.
Exposes /solve, /algebras and the example catalogue as REST endpoints.
Requires: pip install waba-core[server]
"""
from __future__ import annotations
import logging
import uvicorn
from fastapi import FastAPI
from waba.core.config import DEFAULT_CONFIG
from waba.deployment.server.routes import router
from waba.deployment.server.middleware import setup_middleware
from waba.version import FRAMEWORK_NAME, __version__

logger = logging.getLogger(__name__)

app = FastAPI(
    title="WABA-Core Server",
    description="Weighted assumption-based argumentation: extensions under pluggable semirings and budgets",
    version=__version__,
)

setup_middleware(app, DEFAULT_CONFIG.server.cors_origins)
app.include_router(router, prefix="/api/v1")


@app.get("/health")
async def health():
    return {"status": "ok", "framework": FRAMEWORK_NAME.lower(), "version": __version__}


def serve(host: str = DEFAULT_CONFIG.server.host, port: int = DEFAULT_CONFIG.server.port, reload: bool = False):
    uvicorn.run("waba.deployment.server.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    serve()
