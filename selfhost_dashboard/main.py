"""
Selfhost Dashboard - HTTP Layer

This is the thin glue layer that:
1. Loads configuration
2. Builds the dashboard through the factory
3. Maps HTTP requests to facade calls and errors to status codes

All business logic is in the modules, following black box principles.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, FastAPI, Header, HTTPException, Request, Response
from fastapi.responses import FileResponse, JSONResponse

from selfhost_dashboard import __version__
from selfhost_dashboard.config.provider import ConfigProvider, EnvConfigProvider
from selfhost_dashboard.modules.api import (
    AppListResponse,
    AppResponse,
    BootstrapStatus,
    ErrorResponse,
    LaunchResponse,
    LoginRequest,
    SessionResponse,
    SignupRequest,
)
from selfhost_dashboard.modules.dashboard import Dashboard, DashboardFactory
from selfhost_dashboard.modules.errors import (
    AlreadyExists,
    AppNotFound,
    AuthenticationError,
    BootstrapClosed,
    DashboardError,
    InvalidInput,
    ServiceUnavailable,
)
from selfhost_dashboard.modules.session import Session

logger = logging.getLogger(__name__)

AUTH_COOKIE = "auth_token"
# Cookie lifetime for sessions without expiry
PERSISTENT_COOKIE_MAX_AGE = 31536000

ERROR_STATUS = (
    (AuthenticationError, 401),
    (BootstrapClosed, 403),
    (AlreadyExists, 409),
    (InvalidInput, 400),
    (AppNotFound, 404),
    (ServiceUnavailable, 503),
)

router = APIRouter()


def get_dashboard(request: Request) -> Dashboard:
    dashboard = getattr(request.app.state, "dashboard", None)
    if dashboard is None:
        raise HTTPException(503, "Service not initialized")
    return dashboard


def get_token(
    authorization: Optional[str] = Header(None, description="Bearer token"),
    auth_token: Optional[str] = Cookie(None, description="Session cookie"),
) -> str:
    """Take the session token from the Authorization header, falling back to the cookie."""
    if authorization and authorization.startswith("Bearer "):
        return authorization[7:]
    return auth_token or ""


def _set_session_cookie(response: Response, session: Session) -> None:
    if session.expires_at:
        max_age = max(0, int((session.expires_at - datetime.now(UTC)).total_seconds()))
    else:
        max_age = PERSISTENT_COOKIE_MAX_AGE

    response.set_cookie(
        AUTH_COOKIE, session.token, max_age=max_age, httponly=True, samesite="strict"
    )


@router.get("/health")
async def health():
    return {"status": "healthy", "version": __version__}


@router.get("/bootstrap", response_model=BootstrapStatus)
async def bootstrap_status(dashboard: Dashboard = Depends(get_dashboard)):
    """Tell the login page whether to show the signup form."""
    return BootstrapStatus(needs_signup=await dashboard.needs_bootstrap())


@router.post("/signup", response_model=SessionResponse)
async def signup(
    body: SignupRequest, response: Response, dashboard: Dashboard = Depends(get_dashboard)
):
    session = await dashboard.signup(body.username, body.password)
    _set_session_cookie(response, session)
    return SessionResponse.from_session(session)


@router.post("/login", response_model=SessionResponse)
async def login(
    body: LoginRequest, response: Response, dashboard: Dashboard = Depends(get_dashboard)
):
    session = await dashboard.login(body.username, body.password)
    _set_session_cookie(response, session)
    return SessionResponse.from_session(session)


@router.post("/logout")
async def logout(
    response: Response,
    token: str = Depends(get_token),
    dashboard: Dashboard = Depends(get_dashboard),
):
    await dashboard.logout(token)
    response.delete_cookie(AUTH_COOKIE)
    return {"status": "logged_out"}


@router.get("/apps", response_model=AppListResponse)
async def list_apps(
    request: Request,
    token: str = Depends(get_token),
    dashboard: Dashboard = Depends(get_dashboard),
):
    apps = await dashboard.open(token)
    prefix = request.app.state.url_prefix
    return AppListResponse(apps=[AppResponse.from_entry(app, prefix) for app in apps])


@router.get("/open_app/{app_id}", response_model=LaunchResponse)
async def open_app(
    app_id: str,
    token: str = Depends(get_token),
    dashboard: Dashboard = Depends(get_dashboard),
):
    app = await dashboard.open_app(token, app_id)
    return LaunchResponse(id=app.id, launch_target=app.launch_target)


@router.get("/icons/{icon_path:path}")
async def icon(icon_path: str, dashboard: Dashboard = Depends(get_dashboard)):
    path = dashboard.resolve_icon(icon_path)
    if path is None:
        raise HTTPException(404, "Not found")
    return FileResponse(path)


async def dashboard_error_handler(request: Request, exc: DashboardError):
    """Map core errors to status codes; auth failures get one generic message."""
    status_code = 500
    for error_type, code in ERROR_STATUS:
        if isinstance(exc, error_type):
            status_code = code
            break

    if status_code == 500:
        logger.error(f"Unmapped dashboard error {type(exc).__name__} - {request.url.path}")

    body = ErrorResponse(detail=str(exc), retryable=exc.retryable)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def _sweep_sessions(dashboard: Dashboard, interval: int) -> None:
    """Periodically drop expired sessions nobody will present again."""
    while True:
        await asyncio.sleep(interval)
        dashboard.cleanup_expired_sessions()


def create_app(
    config_provider: Optional[ConfigProvider] = None,
    dashboard: Optional[Dashboard] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config_provider: Configuration source, environment by default
        dashboard: Prebuilt dashboard, skips the factory (used by tests)
    """
    config_provider = config_provider or EnvConfigProvider()
    api_config = config_provider.get_api_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Selfhost Dashboard...")

        if app.state.dashboard is None:
            app.state.dashboard = await DashboardFactory.build(config_provider)
            logger.info("Dashboard initialized via factory")

        sweeper = None
        session_config = config_provider.get_session_config()
        if session_config.ttl and session_config.sweep_interval > 0:
            sweeper = asyncio.create_task(
                _sweep_sessions(app.state.dashboard, session_config.sweep_interval)
            )

        yield

        logger.info("Shutting down Selfhost Dashboard...")
        if sweeper:
            sweeper.cancel()
            try:
                await sweeper
            except asyncio.CancelledError:
                pass

    app = FastAPI(
        title="Selfhost Dashboard",
        description="Launcher for locally installed web applications",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.dashboard = dashboard
    app.state.url_prefix = api_config.url_prefix
    app.add_exception_handler(DashboardError, dashboard_error_handler)
    app.include_router(router, prefix=api_config.url_prefix)
    return app


app = create_app()
