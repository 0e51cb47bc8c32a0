from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from database.db import SheetStore
from dependencies.store import get_store
from services.dispatcher import execute_raw

router = APIRouter(tags=["RPC"])

# ==========================================================
# [RPC] single action endpoint
# - body: JSON text {"action": ..., "payload": {...}}, usually sent as
#   text/plain so browsers skip the CORS preflight
# - always HTTP 200 with {"status": "success", "data"} or
#   {"status": "error", "message"}
# ==========================================================

@router.post("/exec")
async def execute(request: Request, store: SheetStore = Depends(get_store)):
    body = await request.body()
    # handlers block on the store lock, keep them off the event loop
    envelope = await run_in_threadpool(execute_raw, store, body)
    return JSONResponse(content=envelope)
