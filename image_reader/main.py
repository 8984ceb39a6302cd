from __future__ import annotations

from fastapi import FastAPI

from image_reader.config import get_settings
from image_reader.handlers import tool_handler

settings = get_settings()

app = FastAPI(title=f"{settings.server_name} API", version=settings.server_version)

app.include_router(tool_handler.router)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}
