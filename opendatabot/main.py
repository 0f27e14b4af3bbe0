# Run from project root: uvicorn opendatabot.main:app --reload

import logging

from fastapi import FastAPI

from opendatabot.api.routes import router
from opendatabot.mcp.server import mcp_router

logging.basicConfig(level=logging.INFO)


app = FastAPI(title="Open Data Bot")
app.include_router(router)
app.include_router(mcp_router, prefix="/mcp")
