import logging
import platform
from pathlib import Path

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from shortlinks import config, crud, database, errors, preview, schemas
from shortlinks.codes import CodeGenerator
from shortlinks.registry import Registry
from shortlinks.resolver import Resolver

logger = logging.getLogger("shortlinks")

FRONTEND_DIR = Path(__file__).parent / "frontend"

DEMO_LINKS = [
    ("azure", "https://azure.microsoft.com"),
    ("docs", "https://docs.microsoft.com"),
    ("node22", "https://nodejs.org/en/blog/release/v22.0.0"),
]

router = APIRouter()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )


# --- Dependencies: everything hangs off app.state, nothing is module-global ---
def get_settings(request: Request) -> config.Settings:
    return request.app.state.settings


def get_registry(request: Request) -> Registry:
    return request.app.state.registry


def get_resolver(request: Request) -> Resolver:
    return request.app.state.resolver


# ---------- API ----------
@router.get("/api/health", response_model=schemas.HealthOut)
def health(settings: config.Settings = Depends(get_settings)):
    return {
        "status": "ok",
        "version": config.VERSION,
        "python": platform.python_version(),
        "environment": settings.environment,
        "port": settings.port,
    }

@router.get("/api/preview", response_model=schemas.PreviewOut, responses={400: {"model": schemas.ErrorOut}})
async def preview_url(url: str | None = Query(None), settings: config.Settings = Depends(get_settings)):
    if not url:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "url required"})
    return await preview.probe(url, timeout=settings.preview_timeout)

@router.get("/api/links", response_model=list[schemas.LinkOut])
def list_links(registry: Registry = Depends(get_registry)):
    return registry.list()

@router.post(
    "/api/links",
    response_model=schemas.LinkOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": schemas.ErrorOut}, 409: {"model": schemas.ErrorOut}},
)
def create_link(link_in: schemas.LinkCreate, registry: Registry = Depends(get_registry)):
    return registry.create(link_in.url, link_in.code)

@router.delete("/api/links/{code}", status_code=status.HTTP_204_NO_CONTENT)
def delete_link(code: str, registry: Registry = Depends(get_registry)):
    registry.delete(code)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# ---- Serve frontend (same origin) ----
@router.get("/", include_in_schema=False)
def serve_index():
    return FileResponse(FRONTEND_DIR / "index.html")

@router.get("/{code}", include_in_schema=False)
def redirect(code: str, resolver: Resolver = Depends(get_resolver)):
    return RedirectResponse(url=resolver.resolve(code), status_code=status.HTTP_302_FOUND)


def _add_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(errors.ValidationError)
    async def on_validation_error(_request: Request, exc: errors.ValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})

    # Malformed request bodies and query strings are 400s like any other bad input
    @app.exception_handler(RequestValidationError)
    async def on_request_validation_error(_request: Request, exc: RequestValidationError):
        first = exc.errors()[0]
        where = ".".join(str(part) for part in first.get("loc", ()))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": f"{where}: {first.get('msg', 'invalid input')}"},
        )

    @app.exception_handler(errors.DuplicateCodeError)
    async def on_duplicate_code(_request: Request, exc: errors.DuplicateCodeError):
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"error": str(exc)})

    @app.exception_handler(errors.NotFound)
    async def on_not_found(_request: Request, exc: errors.NotFound):
        return PlainTextResponse("Link not found", status_code=status.HTTP_404_NOT_FOUND)


def create_app(settings: config.Settings | None = None, store: crud.LinkStore | None = None) -> FastAPI:
    settings = settings or config.load_settings()
    configure_logging(settings.log_level)

    if store is None:
        engine = database.make_engine(settings.database_url)
        database.init_db(engine)
        store = crud.LinkStore(database.make_session_factory(engine))
    if settings.seed_links:
        store.seed(DEMO_LINKS)

    app = FastAPI(
        title="Short Links",
        description="Short codes that redirect to any URL, with click counting.",
        version=config.VERSION,
    )
    app.state.settings = settings
    app.state.registry = Registry(store, CodeGenerator(), code_attempts=settings.code_attempts)
    app.state.resolver = Resolver(store)

    # --- CORS (allow frontend dev servers, etc.) ---
    origins = ["*"] if settings.environment == "dev" else [settings.public_base_url]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _add_error_handlers(app)
    app.mount("/static", StaticFiles(directory=FRONTEND_DIR), name="static")
    app.include_router(router)

    logger.info("Short links ready (env=%s, db=%s)", settings.environment, settings.database_url.split(":", 1)[0])
    return app


def run() -> None:
    settings = config.load_settings()
    configure_logging(settings.log_level)
    logger.info("Starting server on http://%s:%d", settings.host, settings.port)
    uvicorn.run("shortlinks.main:create_app", factory=True, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
