"""FastAPI app for the license key service.

Routes are plain ``def`` handlers so store file I/O runs in the threadpool.
Admin sync reads the raw body itself and hands the write to the threadpool.
Use cases and adapters are built once in ``create_app`` and kept on
``app.state``.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import APIRouter, FastAPI, Header, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Config, create_key_store, create_notifier, load_config
from domain.errors import BadRequestError, LicenseError
from domain.expiry import epoch_millis, iso_millis
from middleware import RequestLogMiddleware, client_ip
from models import (
    AuthResponse, ErrorResponse, HealthResponse, HeartbeatResponse,
    KeyCountsResponse, OkResponse, SyncResponse,
)
from ports.key_store import KeyStorePort
from ports.notifier import NotifierPort
from use_cases.admin import AdminReplicator
from use_cases.lifecycle import LifecycleEngine
from use_cases.reporting import Reporter
from use_cases.sweep import ExpirySweepUseCase
from use_cases.telemetry import TelemetryUseCase

logger = logging.getLogger(__name__)

ENDPOINTS = [
    "GET  /api/authenticate?key=X",
    "GET  /api/heartbeat?key=X&ip=Y",
    "GET  /api/telemetry?telemetry_id=X&macho_key=Y&ip=Z",
    "GET  /api/keys/raw",
    "POST /api/admin/sync",
    "GET  /api/admin/keys",
    "GET  /api/health",
]

router = APIRouter()


def _error(exc: LicenseError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(ErrorResponse(message=exc.message)),
    )


@router.get("/api/authenticate", response_model=AuthResponse)
def authenticate(request: Request, key: Optional[str] = Query(None)):
    result = request.app.state.engine.authenticate(key)
    return AuthResponse(
        expires_at=result.expires_display,
        duration_days=result.duration_days,
        discord=result.discord,
    )


@router.get("/api/heartbeat", response_model=HeartbeatResponse)
def heartbeat(request: Request, key: Optional[str] = Query(None), ip: Optional[str] = Query(None)):
    result = request.app.state.engine.heartbeat(key, ip)
    return HeartbeatResponse(extended_by_hours=result.extended_by_hours)


@router.get("/api/telemetry", response_model=OkResponse)
def telemetry(
    request: Request,
    telemetry_id: Optional[str] = Query(None),
    macho_key: Optional[str] = Query(None),
    ip: Optional[str] = Query(None),
):
    request.app.state.telemetry.record(telemetry_id, macho_key, ip)
    return OkResponse()


@router.get("/api/keys/raw", response_class=PlainTextResponse)
def raw_whitelist(request: Request):
    return PlainTextResponse(request.app.state.reporter.raw_whitelist_text())


@router.post("/api/admin/sync", response_model=SyncResponse)
async def admin_sync(request: Request, x_admin_secret: Optional[str] = Header(None)):
    admin = request.app.state.admin
    ip = client_ip(request)
    # Secret first: a bad body from an unauthorized caller is still a 403
    admin.authorize(x_admin_secret, ip)
    try:
        payload = await request.json()
    except ValueError:
        raise BadRequestError()
    keys = payload.get("keys") if isinstance(payload, dict) else None
    count = await run_in_threadpool(admin.replace, x_admin_secret, keys, ip)
    return SyncResponse(count=count)


@router.get("/api/admin/keys")
def admin_keys(request: Request, x_admin_secret: Optional[str] = Header(None)):
    return request.app.state.admin.fetch(x_admin_secret, client_ip(request))


@router.get("/api/health", response_model=HealthResponse)
def health(request: Request):
    counts = request.app.state.reporter.health()
    return HealthResponse(
        timestamp=iso_millis(request.app.state.clock()),
        keys=KeyCountsResponse(total=counts.total, active=counts.active),
    )


@router.get("/", response_class=PlainTextResponse)
def root():
    return "License API is running. Endpoints: /api/authenticate /api/heartbeat /api/telemetry /api/keys/raw"


async def _sweep_loop(sweep: ExpirySweepUseCase, interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        try:
            await run_in_threadpool(sweep.run_once)
        except Exception as e:
            logger.error(f"[SWEEP] Failed: {e}", exc_info=True)


def create_app(
    cfg: Optional[Config] = None,
    store: Optional[KeyStorePort] = None,
    notifier: Optional[NotifierPort] = None,
    clock: Callable[[], int] = epoch_millis,
) -> FastAPI:
    cfg = cfg or load_config()
    store = store or create_key_store(cfg)
    notifier = notifier or create_notifier(cfg)
    sweep = ExpirySweepUseCase(store, clock=clock)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("License API ready: " + " | ".join(ENDPOINTS))
        sweep_task = None
        if cfg.expiry_sweep_seconds > 0:
            logger.info(f"[SWEEP] Running every {cfg.expiry_sweep_seconds}s")
            sweep_task = asyncio.create_task(_sweep_loop(sweep, cfg.expiry_sweep_seconds))
        try:
            yield
        finally:
            if sweep_task:
                sweep_task.cancel()
                try:
                    await sweep_task
                except asyncio.CancelledError:
                    pass
            await run_in_threadpool(notifier.close)

    app = FastAPI(title="License API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cfg.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLogMiddleware)

    app.state.config = cfg
    app.state.clock = clock
    app.state.store = store
    app.state.notifier = notifier
    app.state.engine = LifecycleEngine(store, heartbeat_hours=cfg.heartbeat_hours, clock=clock)
    app.state.admin = AdminReplicator(store, cfg.admin_secret)
    app.state.reporter = Reporter(store, clock=clock)
    app.state.telemetry = TelemetryUseCase(notifier, cfg.telemetry_id, clock=clock)
    app.state.sweep = sweep

    @app.exception_handler(LicenseError)
    async def license_error_handler(request: Request, exc: LicenseError):
        return _error(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content=jsonable_encoder(ErrorResponse(message="Endpoint not found.")),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(ErrorResponse(message=str(exc.detail))),
        )

    app.include_router(router)
    return app
