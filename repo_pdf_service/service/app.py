"""FastAPI application exposing repository listings and PDF generation."""

import asyncio
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.background import BackgroundTask

from repo_pdf_service.converter import RepoPDFConverter
from repo_pdf_service.core.config import AppConfig
from repo_pdf_service.core.constants import DEFAULT_MAX_DEPTH, PDF_MEDIA_TYPE
from repo_pdf_service.core.exceptions import RepoPDFError, ValidationError
from repo_pdf_service.core.models import RenderOptions, RepoRef
from repo_pdf_service.explorer import RepositoryExplorer
from repo_pdf_service.github import GitHubClient
from repo_pdf_service.service.delivery import ArtifactScope
from repo_pdf_service.tree import RepositorySource

logger = logging.getLogger(__name__)

T = TypeVar("T")

SourceFactory = Callable[[AppConfig], RepositorySource]

INDEX_FILE = "index.html"


class RepoRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    repo_url: Optional[str] = Field(default=None, alias="repoUrl")


class FullStructureRequest(RepoRequest):
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=0, alias="maxDepth")


class GeneratePdfRequest(RepoRequest):
    options: Optional[RenderOptions] = None


def _default_source(config: AppConfig) -> RepositorySource:
    return GitHubClient(config.github)


@contextmanager
def _source_scope(factory: SourceFactory, config: AppConfig) -> Iterator[RepositorySource]:
    """One upstream client per request, closed afterwards."""
    source = factory(config)
    try:
        yield source
    finally:
        close = getattr(source, "close", None)
        if callable(close):
            close()


async def _run_blocking(func: Callable[[], T]) -> T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_validation_errors(errors: List[Dict[str, Any]]) -> str:
    parts = []
    for err in errors:
        location = ".".join(str(item) for item in err.get("loc", ()) if item != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "Invalid request: " + "; ".join(parts)


def create_app(
    config: Optional[AppConfig] = None,
    source_factory: SourceFactory = _default_source,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Application configuration (loaded from the environment if None)
        source_factory: Builds the GitHub capability for each request

    Returns:
        Configured FastAPI app
    """
    if config is None:
        config = AppConfig.from_env()

    app = FastAPI(title="Repo PDF Service", version="1.0.0")
    app.state.config = config
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    router = APIRouter(prefix=config.server.api_prefix)

    @router.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    @router.post("/repo-structure")
    async def repo_structure(payload: RepoRequest) -> Dict[str, Any]:
        repo = RepoRef.from_url(payload.repo_url)

        def _run() -> Dict[str, Any]:
            with _source_scope(source_factory, config) as source:
                entries, readme = RepositoryExplorer(source).root_structure(repo)
            return {
                "structure": [entry.to_dict() for entry in entries],
                "readme": readme.to_dict() if readme else None,
                "repoInfo": repo.to_dict(),
            }

        return await _run_blocking(_run)

    @router.post("/full-structure")
    async def full_structure(payload: FullStructureRequest) -> Dict[str, Any]:
        repo = RepoRef.from_url(payload.repo_url)

        def _run() -> Dict[str, Any]:
            with _source_scope(source_factory, config) as source:
                explorer = RepositoryExplorer(source, max_workers=config.tree_workers)
                tree = explorer.full_structure(repo, payload.max_depth)
            return {
                "structure": [node.to_dict() for node in tree],
                "repoInfo": repo.to_dict(),
            }

        return await _run_blocking(_run)

    @router.post("/generate-pdf")
    async def generate_pdf(payload: GeneratePdfRequest) -> StreamingResponse:
        repo = RepoRef.from_url(payload.repo_url)
        options = payload.options or RenderOptions()
        scope = ArtifactScope(config.workspace_path)

        def _run() -> Path:
            with _source_scope(source_factory, config) as source:
                return RepoPDFConverter(config, source).generate(repo, options, scope.path)

        try:
            pdf_path = await _run_blocking(_run)
        except Exception:
            scope.cleanup()
            raise

        logger.info(f"Sending {pdf_path.name}")
        return StreamingResponse(
            scope.stream(pdf_path),
            media_type=PDF_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{pdf_path.name}"'},
            background=BackgroundTask(scope.cleanup),
        )

    app.include_router(router)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(_: Request, exc: ValidationError) -> JSONResponse:
        logger.warning(f"Rejected request: {exc}")
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        message = _describe_validation_errors(exc.errors())
        logger.warning(message)
        return _error(400, message)

    @app.exception_handler(RepoPDFError)
    async def repo_pdf_error_handler(_: Request, exc: RepoPDFError) -> JSONResponse:
        logger.error(f"Request failed: {exc}")
        return _error(500, exc.message)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(_: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unexpected error: {exc}")
        return _error(500, str(exc) or exc.__class__.__name__)

    build_dir = config.client_build_path

    # Registered last so it never shadows the API routes.
    @app.get("/{full_path:path}", include_in_schema=False)
    async def client_app(full_path: str) -> Any:
        if build_dir is None or not (build_dir / INDEX_FILE).is_file():
            return _error(404, "Not found")

        root = build_dir.resolve()
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
        return FileResponse(root / INDEX_FILE)

    return app


def run_service(config: Optional[AppConfig] = None, log_level: str = "info") -> None:
    """Serve the application with uvicorn."""
    if config is None:
        config = AppConfig.from_env()
    logger.info(f"Server is running on {config.server.host}:{config.server.port}")
    uvicorn.run(
        create_app(config), host=config.server.host, port=config.server.port, log_level=log_level
    )
