import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import Response

from .config import Settings, get_settings
from .errors import RosterLoadError
from .export import rows_to_csv
from .formatting import to_display_row
from .logging_config import setup_logging
from .models import DisplayRowsResponse, HealthResponse, RosterResponse, RowsResponse
from .normalize import normalize_records, summarize
from .rules import EXPORT_MEDIA_TYPE
from .source import load_roster, parse_roster
from .state import RowTable

logger = logging.getLogger("workforce-dashboard")


def _table(app: FastAPI) -> RowTable:
    table: RowTable = app.state.table
    settings: Settings = app.state.settings
    table.ensure_loaded(lambda: normalize_records(load_roster(settings.roster_path)))
    return table


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fail at startup rather than on the first request if the roster is unreadable.
    _table(app)
    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(level=settings.log_level, json_output=settings.log_format == "json")

    app = FastAPI(
        title="workforce-dashboard",
        description="Normalized workforce utilisation table with CSV export",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.table = RowTable()

    @app.get("/health", response_model=HealthResponse)
    def health():
        return {"ok": True}

    @app.get("/rows", response_model=RowsResponse)
    def rows(request: Request):
        current = _table(request.app).rows
        return RowsResponse(rows=list(current), count=len(current))

    @app.get("/rows/display", response_model=DisplayRowsResponse)
    def display_rows(request: Request):
        current = _table(request.app).rows
        return DisplayRowsResponse(rows=[to_display_row(r) for r in current], count=len(current))

    @app.get("/export")
    def export_csv(request: Request):
        current = _table(request.app).rows
        filename = request.app.state.settings.export_filename
        return Response(
            content=rows_to_csv(current),
            media_type=EXPORT_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.post("/roster", response_model=RosterResponse)
    async def upload_roster(request: Request, file: UploadFile = File(...)):
        if not (file.filename or "").lower().endswith(".json"):
            raise HTTPException(status_code=422, detail="Only JSON roster files are supported")

        raw = await file.read()
        try:
            records = parse_roster(raw)
        except RosterLoadError as exc:
            logger.warning("Rejected roster upload %s: %s", file.filename, exc)
            raise HTTPException(status_code=422, detail=str(exc)) from exc

        normalized = request.app.state.table.replace(normalize_records(records))
        return RosterResponse(rows=list(normalized), summary=summarize(records, normalized))

    return app


app = create_app()
