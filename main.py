import inspect
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from openai import AsyncOpenAI

from routes.commentary_route import router as commentary_router
from routes.tts_route import router as tts_router
from services.commentary.decider import CommentaryDecider
from services.commentary.session_store import SessionStore
from services.openai.commentary_gateway import CommentaryModelGateway
from services.voicevox.client import VoicevoxClient
from utils.errors import CommentaryError
from utils.settings import load_settings

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / "public"

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file if present

LOGGER = logging.getLogger(__name__)


async def _close_quietly(client) -> None:
    """Close a client exposing close/aclose, ignoring shutdown errors."""
    if client is None:
        return
    aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
    if aclose is None:
        return
    try:
        if inspect.iscoroutinefunction(aclose):
            await aclose()
        else:
            result = aclose()
            if inspect.isawaitable(result):
                await result
    except Exception:
        # Ignore shutdown errors to avoid masking more important issues.
        pass


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - settings and logging
      - the OpenAI async client and the commentary pipeline around it
      - the session store and its periodic sweep
      - the HTTP client used by the VOICEVOX proxy
    and attach them to `app.state`.
    """
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.state.settings = settings

    # Initialize OpenAI async client
    openai_api_key = os.getenv("OPENAI_API_KEY")
    if not openai_api_key:
        raise RuntimeError("OPENAI_API_KEY environment variable is not set")

    try:
        openai_client = AsyncOpenAI(timeout=settings.openai_timeout_sec)
    except Exception as exc:
        raise RuntimeError("Failed to initialize OpenAI Async client") from exc
    app.state.openai_client = openai_client

    store = SessionStore(
        history_limit=settings.session_history_limit,
        ttl_seconds=settings.session_ttl_sec,
    )
    store.start_sweeper(settings.session_sweep_interval_sec)
    app.state.session_store = store

    gateway = CommentaryModelGateway(openai_client, settings)
    app.state.commentary_decider = CommentaryDecider(store, gateway, settings)

    http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.voicevox_timeout_sec))
    app.state.voicevox_client = VoicevoxClient(http_client, settings.voicevox_base)

    LOGGER.info("Commentary service ready (model=%s)", settings.openai_model)
    try:
        yield
    finally:
        await store.stop_sweeper()
        await _close_quietly(http_client)
        await _close_quietly(getattr(app.state, "openai_client", None))


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    app = FastAPI(lifespan=lifespan)

    @app.exception_handler(CommentaryError)
    async def commentary_error_handler(request: Request, exc: CommentaryError):
        """Render taxonomy errors as `{error, detail?, sessionId?}`."""
        if exc.status_code >= 500:
            LOGGER.error("Commentary request failed (%s): %s", exc.status_code, exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.get("/", include_in_schema=False)
    async def serve_index():
        """
        Serve the frontend index page from the public directory.
        """
        index_path = PUBLIC_DIR / "index.html"
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="Frontend not found")
        return FileResponse(index_path)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports OpenAI client presence and live session count.
        """
        has_openai = getattr(request.app.state, "openai_client", None) is not None
        store = getattr(request.app.state, "session_store", None)
        return {
            "ok": True,
            "openai_available": has_openai,
            "session_count": len(store) if store is not None else 0,
        }

    # Register application routers
    app.include_router(commentary_router)
    app.include_router(tts_router)

    # Serve remaining static assets from the public directory, if it exists.
    if PUBLIC_DIR.exists():
        app.mount("/", StaticFiles(directory=PUBLIC_DIR), name="public")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = load_settings()
    uvicorn.run(app, host=_settings.host, port=_settings.port)
