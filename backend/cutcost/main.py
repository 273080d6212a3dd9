"""CNC Cutting Cost Calculator — FastAPI application entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse

from cutcost.config import settings
from cutcost.api.routes_measure import router as measure_router
from cutcost.api.routes_estimate import router as estimate_router
from cutcost.api.routes_calculator import router as calculator_router

VERSION = "0.1.0"

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
)

app = FastAPI(
    title=settings.app_name,
    version=VERSION,
    debug=settings.debug,
    description="Measure DXF/SVG cutting paths and estimate CNC cutting cost.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(measure_router, prefix="/api")
app.include_router(estimate_router, prefix="/api")
app.include_router(calculator_router, prefix="/api")


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": VERSION}


# ── Serve frontend static files ─────────────────────────────────────────
# When running from PyInstaller, _MEIPASS points to the temp extract dir.
# In development, the frontend/dist folder sits alongside the backend.

def _find_frontend_dist() -> Optional[Path]:
    """Locate the built frontend dist folder."""
    if getattr(sys, "_MEIPASS", None):
        candidate = Path(sys._MEIPASS) / "frontend_dist"
        if candidate.is_dir():
            return candidate
    candidate = Path(__file__).resolve().parent.parent.parent / "frontend" / "dist"
    if candidate.is_dir():
        return candidate
    return None


_frontend = _find_frontend_dist()
if _frontend:
    app.mount("/assets", StaticFiles(directory=str(_frontend / "assets")), name="static")

    @app.get("/{full_path:path}")
    async def serve_spa(full_path: str):
        """Serve index.html for all non-API routes (SPA fallback)."""
        file = _frontend / full_path
        if full_path and file.is_file():
            return FileResponse(str(file))
        return FileResponse(str(_frontend / "index.html"))
