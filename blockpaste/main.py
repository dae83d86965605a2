"""
blockpaste - Main FastAPI application.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from blockpaste import crypto, envelope
from blockpaste.config import Settings, settings as default_settings
from blockpaste.database import BlockDatabase
from blockpaste.exceptions import PasteError
from blockpaste.routes import health, pastes
from blockpaste.store import PasteStore

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if default_settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[BlockDatabase] = None,
) -> FastAPI:
    """
    Build the FastAPI application around a single shared block store client.

    Args:
        settings: Settings to use (module settings if omitted)
        database: Block store client (Redis at settings.REDIS_URL if omitted)

    Returns:
        Configured FastAPI app
    """
    settings = settings or default_settings
    database = database or BlockDatabase(settings.REDIS_URL)

    app = FastAPI(
        title="blockpaste",
        description="A content-addressed pastebin with optional encryption",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.database = database
    app.state.paste_store = PasteStore(
        database,
        # Read cap sized to the largest envelope a maximum-size paste encodes to
        max_size=envelope.max_encoded_size(settings.MAX_PASTE_SIZE, settings.PASTE_FORMAT),
        get_timeout=settings.store_get_timeout,
    )
    app.state.usage_text = pastes.build_usage_text(settings)

    # Add CORS middleware (optional, for cross-origin requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def validate_path(request: Request, call_next):
        """Reject non-absolute or overlong paths before routing."""
        path = request.url.path
        if not path.startswith("/"):
            return PlainTextResponse("Invalid path", status_code=400)
        if len(path) > settings.MAX_PATH_LENGTH:
            return PlainTextResponse("Path too long", status_code=414)
        return await call_next(request)

    @app.exception_handler(PasteError)
    async def paste_error_handler(request: Request, exc: PasteError) -> PlainTextResponse:
        """Translate paste errors into safe plain-text responses."""
        level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
        logger.log(level, f"{request.method} {request.url.path} failed - {exc.reason}")
        return PlainTextResponse(exc.detail, status_code=exc.status_code)

    # Include route modules
    app.include_router(health.router)
    app.include_router(pastes.router)

    @app.on_event("startup")
    async def startup_event():
        """Startup event handler."""
        logger.info("blockpaste starting...")
        crypto.assert_entropy()
        await database.connect()

        if database.using_fallback:
            logger.warning("⚠️  STORE: Using IN-MEMORY block store (Redis not available)")
            logger.warning("   Pastes will NOT persist across server restarts!")
        else:
            logger.info("✅ STORE: Connected to Redis block store")
        logger.info(f"Paste format: {settings.PASTE_FORMAT.value}")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Shutdown event handler."""
        logger.info("blockpaste shutting down...")
        await database.close()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    tls_enabled = bool(default_settings.TLS_CERT_FILE and default_settings.TLS_KEY_FILE)
    uvicorn.run(
        "blockpaste.main:app",
        host=default_settings.HTTP_BIND_ADDR,
        port=default_settings.HTTP_PORT,
        timeout_keep_alive=default_settings.HTTP_IDLE_TIMEOUT,
        ssl_certfile=default_settings.TLS_CERT_FILE if tls_enabled else None,
        ssl_keyfile=default_settings.TLS_KEY_FILE if tls_enabled else None,
        reload=default_settings.DEBUG,
    )
