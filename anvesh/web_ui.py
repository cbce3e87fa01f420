"""
FastAPI Web UI for the Anvesh meta search engine

Serves the search frontend (index, search, about and settings pages) and a
JSON API over the same search service.

Features:
- In-memory result caching with TTL and periodic purge
- Per-client rate limiting
- Public instance listing from docs/instances.md
"""

import sys
import json
import asyncio
import logging
import argparse
from contextlib import asynccontextmanager
from typing import List, Optional
from urllib.parse import unquote, urlencode

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, ValidationError

from . import config
from .models import EngineError, SearchParams, TimeRelevancy
from .rate_limiter import RateLimiter
from .repositories import EngineFactory, InstanceRepository
from .services import SearchResults, SearchService, initialize_search_service

logger = logging.getLogger(__name__)

# Preferences cookie written by static/js/settings.js
COOKIE_NAME = "appCookie"

ROBOTS_TXT = """User-agent: *
Allow: /
Disallow: /search
Disallow: /api/
"""

SAFE_SEARCH_LEVELS = {
    0: "None",
    1: "Low",
    2: "Moderate",
    3: "High (blocklist)",
    4: "Aggressive (blocklisted queries refused)",
}

router = APIRouter()


# ============================================================================
# Data Models
# ============================================================================

class ResultItem(BaseModel):
    """One ranked search result"""
    title: str
    url: str
    description: str
    engines: List[str]


class EngineErrorItem(BaseModel):
    """Failure of one upstream engine"""
    engine: str
    error: str
    severity_level: int


class SearchResponse(BaseModel):
    """Complete search API response"""
    query: str
    page: int
    results: List[ResultItem]
    engine_errors: List[EngineErrorItem]
    no_engines_selected: bool
    disallowed: bool
    filtered_count: int


class InstanceItem(BaseModel):
    """Public instance entry"""
    url: str
    network: str
    version: str
    location: str
    cdn: bool
    maintainer: str
    tls: bool
    ipv6: bool
    comment: str


class UserPreferences(BaseModel):
    """Preferences stored in the settings cookie"""
    theme: Optional[str] = None
    colorscheme: Optional[str] = None
    engines: Optional[List[str]] = None
    safe_search_level: Optional[int] = None


# ============================================================================
# Helper Functions
# ============================================================================

def read_preferences(request: Request) -> UserPreferences:
    """Parse the settings cookie, ignoring it if malformed"""
    raw = request.cookies.get(COOKIE_NAME)
    if not raw:
        return UserPreferences()
    try:
        return UserPreferences(**json.loads(unquote(raw)))
    except (ValueError, TypeError, ValidationError) as e:
        logger.warning(f"Ignoring malformed {COOKIE_NAME} cookie: {e}")
        return UserPreferences()


def build_search_params(q: str,
                        page: int,
                        engines: Optional[str],
                        time: Optional[str],
                        prefs: UserPreferences) -> SearchParams:
    """
    Build validated search params from query string values and preferences.

    Raises:
        ValueError: On a blank query or an unknown time range
    """
    if engines is not None:
        engine_list = [e for e in engines.split(",") if e.strip()]
    else:
        engine_list = prefs.engines

    time_relevance = TimeRelevancy.from_string(time) if time else None

    return SearchParams(
        query=q,
        page=max(1, page),
        engines=engine_list,
        time_relevance=time_relevance
    )


def requested_safe_search(safesearch: Optional[int], prefs: UserPreferences) -> Optional[int]:
    level = safesearch if safesearch is not None else prefs.safe_search_level
    if level is None:
        return None
    return min(max(level, 0), 4)


def to_response(params: SearchParams, results: SearchResults) -> SearchResponse:
    return SearchResponse(
        query=params.query,
        page=params.page,
        results=[
            ResultItem(title=r.title, url=r.url, description=r.description, engines=list(r.engines))
            for r in results.results
        ],
        engine_errors=[
            EngineErrorItem(engine=e.engine, error=e.error, severity_level=e.severity_level)
            for e in results.engine_errors_info
        ],
        no_engines_selected=results.no_engines_selected,
        disallowed=results.disallowed,
        filtered_count=results.filtered_count
    )


def page_query(q: str,
               engines: Optional[str],
               safesearch: Optional[int],
               time: Optional[str]) -> str:
    """Query string shared by the previous/next links of a results page"""
    values = {"q": q}
    if engines is not None:
        values["engines"] = engines
    if safesearch is not None:
        values["safesearch"] = safesearch
    if time:
        values["time"] = time
    return urlencode(values)


def style_context(request: Request, prefs: Optional[UserPreferences] = None) -> dict:
    prefs = prefs or read_preferences(request)
    return {
        "request": request,
        "app_name": config.AppConfig.APP_NAME,
        "version": config.AppConfig.APP_VERSION,
        "theme": prefs.theme or config.StyleConfig.THEME,
        "colorscheme": prefs.colorscheme or config.StyleConfig.COLORSCHEME,
    }


def render(request: Request, template: str, context: dict, status_code: int = 200) -> HTMLResponse:
    templates: Jinja2Templates = request.app.state.templates
    return templates.TemplateResponse(request, template, context, status_code=status_code)


def rate_limit(request: Request) -> None:
    limiter: Optional[RateLimiter] = request.app.state.rate_limiter
    if limiter is not None:
        limiter(request)


# ============================================================================
# Page Endpoints
# ============================================================================

@router.get("/", response_class=HTMLResponse, dependencies=[Depends(rate_limit)])
async def index(request: Request):
    """Serve the main search page"""
    return render(request, "index.html", style_context(request))


@router.get("/search", response_class=HTMLResponse, dependencies=[Depends(rate_limit)])
async def search_page(request: Request,
                      q: str = "",
                      page: int = 1,
                      engines: Optional[str] = None,
                      safesearch: Optional[int] = None,
                      time: Optional[str] = None):
    """Search and render the results page"""
    if not q.strip():
        return RedirectResponse(url="/", status_code=303)

    prefs = read_preferences(request)
    context = style_context(request, prefs)
    try:
        params = build_search_params(q, page, engines, time, prefs)
    except ValueError as e:
        context.update({"query": q.strip(), "page": 1, "error": str(e)})
        return render(request, "search.html", context, status_code=400)

    service: SearchService = request.app.state.search_service
    results = await service.search(params, requested_safe_search(safesearch, prefs))

    context.update({
        "query": params.query,
        "page": params.page,
        "time": time or "",
        "page_query": page_query(params.query, engines, safesearch, time),
        "results": results.results,
        "engine_errors": results.engine_errors_info,
        "no_engines_selected": results.no_engines_selected,
        "disallowed": results.disallowed,
        "filtered_count": results.filtered_count,
    })
    return render(request, "search.html", context)


@router.get("/about", response_class=HTMLResponse, dependencies=[Depends(rate_limit)])
async def about(request: Request):
    """Serve the about page"""
    return render(request, "about.html", style_context(request))


@router.get("/settings", response_class=HTMLResponse, dependencies=[Depends(rate_limit)])
async def settings(request: Request):
    """Serve the settings page"""
    prefs = read_preferences(request)
    service: SearchService = request.app.state.search_service
    active = service.engine_handler.engine_names

    context = style_context(request, prefs)
    context.update({
        "engines": active,
        "selected_engines": prefs.engines if prefs.engines is not None else active,
        "themes": config.StyleConfig.THEMES,
        "colorschemes": config.StyleConfig.COLORSCHEMES,
        "safe_search_levels": SAFE_SEARCH_LEVELS,
        "safe_search_level": requested_safe_search(None, prefs),
        "server_safe_search": service.safe_search,
        "cookie_name": COOKIE_NAME,
    })
    return render(request, "settings.html", context)


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots_txt():
    return ROBOTS_TXT


# ============================================================================
# API Endpoints
# ============================================================================

@router.get("/api/search", response_model=SearchResponse, dependencies=[Depends(rate_limit)])
async def api_search(request: Request,
                     q: str = "",
                     page: int = 1,
                     engines: Optional[str] = None,
                     safesearch: Optional[int] = None,
                     time: Optional[str] = None):
    """
    Search and return JSON.

    Args:
        q: Search query
        page: 1-based page number
        engines: Optional comma-separated engine names
        safesearch: Optional safe search level 0-4
        time: Optional time range (anytime, day, week, month, year)
    """
    prefs = read_preferences(request)
    try:
        params = build_search_params(q, page, engines, time, prefs)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    service: SearchService = request.app.state.search_service
    results = await service.search(params, requested_safe_search(safesearch, prefs))
    return to_response(params, results)


@router.get("/api/engines", dependencies=[Depends(rate_limit)])
async def get_engines(request: Request):
    """Get active and supported engines"""
    service: SearchService = request.app.state.search_service
    return {
        "active": service.engine_handler.engine_names,
        "supported": EngineFactory.get_supported_engines(),
    }


@router.get("/api/instances", response_model=List[InstanceItem], dependencies=[Depends(rate_limit)])
async def get_instances(request: Request,
                        network: Optional[str] = None,
                        tls: Optional[bool] = None,
                        ipv6: Optional[bool] = None):
    """Get documented public instances"""
    repository: InstanceRepository = request.app.state.instance_repository
    instances = repository.list_instances(network=network, tls=tls, ipv6=ipv6)
    return [InstanceItem(**i.to_dict()) for i in instances]


@router.get("/api/cache/status")
async def get_cache_status(request: Request):
    """Get cache status for all keys"""
    cache = request.app.state.search_service.cache
    if cache is None:
        return {"enabled": False, "cache_ttl_seconds": 0, "entries": {}}
    return {
        "enabled": True,
        "cache_ttl_seconds": cache.ttl_seconds,
        "entries": await cache.status()
    }


@router.post("/api/cache/clear")
async def clear_cache(request: Request):
    """Manually clear all cache"""
    cache = request.app.state.search_service.cache
    if cache is not None:
        await cache.clear()
    return {"status": "cache cleared"}


async def not_found(request: Request, exc: Exception):
    """Render the 404 page (JSON for API paths)"""
    if request.url.path.startswith(config.AppConfig.API_PREFIX):
        return JSONResponse({"detail": "Not Found"}, status_code=404)
    return render(request, "not_found.html", style_context(request), status_code=404)


# ============================================================================
# Background Tasks
# ============================================================================

async def periodic_cache_purge(service: SearchService, interval: int):
    """Background task that drops expired cache entries"""
    logger.info(f"Starting periodic cache purge task (interval: {interval}s)")

    while True:
        await asyncio.sleep(interval)
        try:
            await service.cache.purge_expired()
        except Exception as e:
            logger.error(f"Error in periodic cache purge: {e}", exc_info=True)


# ============================================================================
# Initialization
# ============================================================================

def create_app(search_service: Optional[SearchService] = None,
               instance_repository: Optional[InstanceRepository] = None,
               rate_limiter: Optional[RateLimiter] = None,
               cors_origins: Optional[List[str]] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Every component defaults to one built from configuration.
    """
    app_config = config.AppConfig

    if search_service is None:
        search_service = initialize_search_service()
    if instance_repository is None:
        instance_repository = InstanceRepository(config.InstanceConfig.INSTANCES_FILE)
    if rate_limiter is None and config.FeatureFlags.ENABLE_RATE_LIMIT:
        rate_limiter = RateLimiter(
            config.RateLimitConfig.NUMBER_OF_REQUESTS,
            config.RateLimitConfig.TIME_LIMIT
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application starting up...")
        purge_task = None
        if search_service.cache is not None:
            purge_task = asyncio.create_task(
                periodic_cache_purge(search_service, config.CacheConfig.CACHE_PURGE_INTERVAL)
            )
        logger.info("Startup complete")
        try:
            yield
        finally:
            if purge_task:
                purge_task.cancel()
            search_service.close()
            logger.info("Application shut down")

    app = FastAPI(
        title=app_config.APP_NAME,
        description=app_config.APP_DESCRIPTION,
        version=app_config.APP_VERSION,
        lifespan=lifespan
    )

    app.state.search_service = search_service
    app.state.instance_repository = instance_repository
    app.state.rate_limiter = rate_limiter
    app.state.templates = Jinja2Templates(directory=app_config.TEMPLATES_DIR)

    if config.FeatureFlags.ENABLE_CORS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins if cors_origins is not None else app_config.CORS_ORIGINS,
            allow_credentials=False,
            allow_methods=["GET"],
            allow_headers=["Origin", "Content-Type", "Referer", "Cookie"],
        )

    # Mount static files
    app.mount("/static", StaticFiles(directory=app_config.STATIC_DIR), name="static")

    app.include_router(router)
    app.add_exception_handler(404, not_found)

    return app


# ============================================================================
# Main
# ============================================================================

def main():
    """
    Main entry point with CLI argument support.

    Supports:
        --env-file: Path to .env file
        --verbose: Enable debug logging
        --host: Server host (default: 127.0.0.1)
        --port: Server port (default: 8080)
        --reload: Enable auto-reload (development)
    """
    parser = argparse.ArgumentParser(
        description="Anvesh meta search engine - Web UI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start with default .env
  python -m anvesh

  # Use custom .env file
  python -m anvesh --env-file /path/to/custom.env

  # Custom host and port
  python -m anvesh --host 0.0.0.0 --port 9000

  # Development mode with auto-reload
  python -m anvesh --reload --verbose
        """
    )

    parser.add_argument(
        "--env-file", "-e",
        help="Path to .env file (default: .env)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging"
    )

    parser.add_argument(
        "--host",
        default=None,
        help=f"Server host (default: {config.AppConfig.HOST})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help=f"Server port (default: {config.AppConfig.PORT})"
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development"
    )

    parser.add_argument(
        "--log-file",
        help="Path to log file (optional)"
    )

    args = parser.parse_args()

    if args.env_file:
        config.load_environment(args.env_file)

    config.setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        config.validate_config()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    host = args.host or config.AppConfig.HOST
    port = args.port or config.AppConfig.PORT

    logger.info(f"Starting {config.AppConfig.APP_NAME} v{config.AppConfig.APP_VERSION}")
    logger.info(f"Host: {host}:{port}")
    logger.info(f"Engines: {', '.join(config.EngineConfig.get_engine_list())}")
    logger.info(f"Cache TTL: {config.CacheConfig.CACHE_TTL_SECONDS}s")

    import uvicorn
    try:
        uvicorn.run(
            "anvesh.web_ui:create_app",
            factory=True,
            host=host,
            port=port,
            workers=None if (args.reload or config.FeatureFlags.RELOAD) else config.AppConfig.WORKERS,
            reload=args.reload or config.FeatureFlags.RELOAD,
            log_level="debug" if args.verbose else "info"
        )
    except EngineError as e:
        logger.error(f"Failed to initialize engines: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
