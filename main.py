from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings

logging.basicConfig(level=settings.LOG_LEVEL)

# quiet HTTP library debug logs
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)


# middlewares
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# routers
from routers import rpc, sheets

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

# CORS (the dashboard front-end posts text/plain, so no preflight is needed for /v1/exec)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# request latency (X-Latency-Ms response header)
app.add_middleware(TimingMiddleware)

# global error handlers (uniform {"status": "error", "message"} body)
add_error_handlers(app)

# /v1 prefixed routers
app.include_router(rpc.router,    prefix="/v1")
app.include_router(sheets.router, prefix="/v1")


# health check
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}


@app.get("/")
def root():
    return {"message": f"{settings.APP_TITLE} - POST /v1/exec with {{action, payload}}"}
