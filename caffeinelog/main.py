"""Caffeine Log Server - Entry point.

Serves the REST API for periods, drink entries and reports, and mounts the
MCP server. Uses Starlette with uvicorn.
"""

import logging
import os
from datetime import date

import uvicorn
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route, Mount

from .core.importer import parse_bulk_csv
from .core.models import AllVisibleScope, DrinkEntryInput, PeriodInput, YearScope
from .core.periods import resolve_active_period, visible_periods
from .core.reports import build_report
from .core.statistics import compute_stats
from .shell.mcp_server import mcp
from .shell.storage import get_store


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def _read_json(request: Request) -> dict | None:
    """Parse a JSON object body, or None if it is not one."""
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


# ==================== Route Handlers ====================


async def health_check(request: Request) -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse({"status": "healthy", "service": "caffeinelog"})


async def list_periods(request: Request) -> JSONResponse:
    """List periods; ?visible=true drops hidden ones."""
    periods = get_store().list_periods()
    if request.query_params.get("visible", "").lower() == "true":
        periods = visible_periods(periods)
    return JSONResponse([p.model_dump(mode="json") for p in periods])


async def create_period(request: Request) -> JSONResponse:
    body = await _read_json(request)
    try:
        data = PeriodInput(**(body or {}))
    except ValidationError as e:
        logger.warning("Invalid period data: %s", e.errors())
        return JSONResponse({"error": "Invalid period data"}, status_code=400)

    period = get_store().create_period(data)
    if period is None:
        return JSONResponse({"error": "Failed to create period"}, status_code=500)
    return JSONResponse(period.model_dump(mode="json"), status_code=201)


async def update_period(request: Request) -> JSONResponse:
    period_id = request.path_params["period_id"]
    body = await _read_json(request)
    try:
        data = PeriodInput(**(body or {}))
    except ValidationError as e:
        logger.warning("Invalid period data: %s", e.errors())
        return JSONResponse({"error": "Invalid period data"}, status_code=400)

    period = get_store().update_period(period_id, data)
    if period is None:
        return JSONResponse({"error": "Period not found"}, status_code=404)
    return JSONResponse(period.model_dump(mode="json"))


async def toggle_period_hidden(request: Request) -> JSONResponse:
    period_id = request.path_params["period_id"]
    body = await _read_json(request) or {}
    hidden = body.get("hidden")

    if not isinstance(hidden, bool):
        return JSONResponse({"error": "Hidden must be a boolean value"}, status_code=400)

    period = get_store().set_period_hidden(period_id, hidden)
    if period is None:
        return JSONResponse({"error": "Period not found"}, status_code=404)
    return JSONResponse(period.model_dump(mode="json"))


async def delete_period(request: Request) -> Response:
    period_id = request.path_params["period_id"]
    if not get_store().delete_period(period_id):
        return JSONResponse({"error": "Period not found"}, status_code=404)
    return Response(status_code=204)


async def list_entries(request: Request) -> JSONResponse:
    entries = get_store().list_entries()
    return JSONResponse([e.model_dump(mode="json") for e in entries])


async def list_entries_by_period(request: Request) -> JSONResponse:
    entries = get_store().list_entries_by_period(request.path_params["period_id"])
    return JSONResponse([e.model_dump(mode="json") for e in entries])


async def create_entry(request: Request) -> JSONResponse:
    body = await _read_json(request)
    try:
        data = DrinkEntryInput(**(body or {}))
    except ValidationError as e:
        logger.warning("Invalid drink entry data: %s", e.errors())
        return JSONResponse({"error": "Invalid drink entry data"}, status_code=400)

    entry = get_store().create_entry(data)
    if entry is None:
        return JSONResponse({"error": "Failed to create drink entry"}, status_code=500)
    return JSONResponse(entry.model_dump(mode="json"), status_code=201)


async def delete_entry(request: Request) -> Response:
    entry_id = request.path_params["entry_id"]
    if not get_store().delete_entry(entry_id):
        return JSONResponse({"error": "Drink entry not found"}, status_code=404)
    return Response(status_code=204)


async def import_entries(request: Request) -> JSONResponse:
    """Bulk import CSV text into a period (?period_id=..., default first period)."""
    store = get_store()
    period = resolve_active_period(store.list_periods(), request.query_params.get("period_id"))
    if period is None:
        return JSONResponse({"error": "No period selected"}, status_code=400)

    text = (await request.body()).decode("utf-8", errors="replace")
    result = parse_bulk_csv(text, period.id)
    if not result.ok:
        return JSONResponse({"error": "Invalid CSV", "details": result.errors}, status_code=400)

    imported = 0
    failed = 0
    for data in result.entries:
        if store.create_entry(data) is None:
            failed += 1
        else:
            imported += 1

    logger.info("Bulk import into %s: %d imported, %d failed", period.id[:8], imported, failed)
    return JSONResponse({"imported": imported, "failed": failed})


async def get_report(request: Request) -> JSONResponse:
    """Report snapshot for ?period_id=... (default first period)."""
    store = get_store()
    report = build_report(
        store.list_periods(),
        store.list_entries(),
        request.query_params.get("period_id"),
    )
    return JSONResponse(report.model_dump(mode="json"))


async def get_yearly_stats(request: Request) -> JSONResponse:
    try:
        year = int(request.query_params.get("year", date.today().year))
    except ValueError:
        return JSONResponse({"error": "Year must be an integer"}, status_code=400)

    stats = compute_stats(get_store().list_entries(), YearScope(year=year))
    return JSONResponse({"year": year, **stats.model_dump()})


async def get_visible_stats(request: Request) -> JSONResponse:
    store = get_store()
    scope = AllVisibleScope(periods=store.list_periods())
    stats = compute_stats(store.list_entries(), scope)
    return JSONResponse(stats.model_dump())


# ==================== Create ASGI App ====================


def _cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "http://localhost:5173")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def create_app() -> Starlette:
    """Create the Starlette application with the REST API and MCP at root.

    The MCP streamable_http_app() handles /mcp/ internally when mounted at root.
    """
    mcp_app = mcp.streamable_http_app()

    routes = [
        Route("/health", health_check, methods=["GET"]),
        Route("/api/periods", list_periods, methods=["GET"]),
        Route("/api/periods", create_period, methods=["POST"]),
        Route("/api/periods/{period_id}", update_period, methods=["PUT"]),
        Route("/api/periods/{period_id}", delete_period, methods=["DELETE"]),
        Route("/api/periods/{period_id}/toggle-hidden", toggle_period_hidden, methods=["PATCH"]),
        Route("/api/drink-entries", list_entries, methods=["GET"]),
        Route("/api/drink-entries", create_entry, methods=["POST"]),
        Route("/api/drink-entries/import", import_entries, methods=["POST"]),
        Route("/api/drink-entries/period/{period_id}", list_entries_by_period, methods=["GET"]),
        Route("/api/drink-entries/{entry_id}", delete_entry, methods=["DELETE"]),
        Route("/api/report", get_report, methods=["GET"]),
        Route("/api/stats/year", get_yearly_stats, methods=["GET"]),
        Route("/api/stats/visible", get_visible_stats, methods=["GET"]),
        # Mount MCP app at root - it handles /mcp/ path internally
        Mount("/", app=mcp_app),
    ]

    app = Starlette(
        routes=routes,
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=_cors_origins(),
                allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
                allow_headers=["*"],
            ),
        ],
        lifespan=mcp_app.router.lifespan_context,
    )

    return app


app = create_app()


def main() -> None:
    """Run the server."""
    port = int(os.environ.get("PORT", 8080))
    host = os.environ.get("HOST", "0.0.0.0")

    logger.info("Starting Caffeine Log server on %s:%d", host, port)

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
