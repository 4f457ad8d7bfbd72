# maintdesk/app.py
import time
from typing import Any, Dict, Optional

# Load .env BEFORE any maintdesk imports (they read env vars at import time)
from dotenv import load_dotenv
load_dotenv(override=True)

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse, Response
from pydantic import ValidationError

from maintdesk import monitoring
from maintdesk.forms import RequestForm
from maintdesk.listing import RequestList, newest_first
from maintdesk.models import Equipment, MaintenanceRequest, NewMaintenanceRequest
from maintdesk.navigation import Navigator, View
from maintdesk.pages import render_form_page, render_list_fragment, render_list_page, render_success_page
from maintdesk.store import LoadFailure, RemoteStore

app = FastAPI(title="Maintenance Desk")

# one store client per process; created lazily on first query
store = RemoteStore()

E_VALIDATION = "E_VALIDATION"
E_LOAD_FAILED = "E_LOAD_FAILED"
E_SUBMIT_FAILED = "E_SUBMIT_FAILED"
E_INTERNAL = "E_INTERNAL"

CARDS_PATH = "/requests/cards"


def _error_response(status_code: int, error_code: str, message: str,
                    details: Optional[Dict[str, Any]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "error",
            "error_code": error_code,
            "message": message,
            "details": details or {},
        },
    )


# ---------------------------------------------------------------------------
# Metrics middleware
# ---------------------------------------------------------------------------
@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start = time.time()
    endpoint = request.url.path
    method = request.method
    status = "500"
    try:
        response = await call_next(request)
        status = str(response.status_code)
        return response
    except Exception:
        monitoring.logger.exception("Unhandled exception in request", extra={"path": endpoint})
        raise
    finally:
        monitoring.observe_request(start, endpoint, method, status)


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------
@app.get("/")
def index():
    return RedirectResponse(Navigator().path, status_code=303)


@app.get(Navigator(View.REQUESTS).path, response_class=HTMLResponse)
def requests_page() -> HTMLResponse:
    return HTMLResponse(render_list_page(Navigator(View.REQUESTS), CARDS_PATH))


@app.get(CARDS_PATH, response_class=HTMLResponse)
def requests_cards() -> HTMLResponse:
    listing = RequestList(store)
    listing.load()
    return HTMLResponse(render_list_fragment(listing))


@app.get(Navigator(View.FORM).path, response_class=HTMLResponse)
def request_form() -> HTMLResponse:
    form = RequestForm(store)
    form.load_equipment()
    return HTMLResponse(render_form_page(form, Navigator(View.FORM).path))


@app.post(Navigator(View.FORM).path, response_class=HTMLResponse)
async def submit_request_form(request: Request) -> HTMLResponse:
    """
    POST /requests/new
    Form fields plus action=submit|reset. Re-renders the form on validation
    or store errors; shows the success page otherwise.
    """
    posted = await request.form()
    form = RequestForm(store)
    form.load_equipment()
    form.update(posted)

    if posted.get("action") == "reset":
        form.reset()
    elif form.submit():
        return HTMLResponse(render_success_page(form))

    return HTMLResponse(render_form_page(form, Navigator(View.FORM).path))


# ---------------------------------------------------------------------------
# JSON API
# ---------------------------------------------------------------------------
@app.get("/api/equipment")
def api_equipment():
    try:
        rows = store.list_equipment()
        equipment = [Equipment.model_validate(r) for r in rows]
    except (LoadFailure, ValidationError) as e:
        monitoring.logger.error("Error loading equipment", extra={"error": str(e)})
        return _error_response(502, E_LOAD_FAILED, "Could not load equipment", {"exception": str(e)})
    return {
        "status": "success",
        "equipment": [e.model_dump(mode="json", by_alias=True) for e in equipment],
    }


@app.get("/api/requests")
def api_requests():
    try:
        rows = store.list_requests()
        requests = newest_first([MaintenanceRequest.model_validate(r) for r in rows])
    except (LoadFailure, ValidationError) as e:
        monitoring.logger.error("Error loading requests", extra={"error": str(e)})
        return _error_response(502, E_LOAD_FAILED, "Could not load requests", {"exception": str(e)})
    return {
        "status": "success",
        "requests": [r.model_dump(mode="json", by_alias=True) for r in requests],
    }


@app.post("/api/requests")
def api_create_request(req: NewMaintenanceRequest):
    """
    POST /api/requests
    Body: { "title": "...", "equipment_id": "...", "request_type": "corrective",
            "scheduled_date": "YYYY-MM-DD", "priority": "medium",
            "description": "...", "attachment_url": "..." }
    """
    monitoring.logger.info("Received /api/requests submission", extra={"equipment_id": req.equipment_id})
    form = RequestForm(store)
    form.update(req.model_dump())
    try:
        ok = form.submit()
    except Exception as e:
        monitoring.logger.exception("Unexpected error in /api/requests handler")
        return _error_response(500, E_INTERNAL, "Internal server error", {"exception": str(e)})

    if ok:
        return JSONResponse(status_code=201, content={"status": "success", "request": form.created})
    if form.errors:
        return _error_response(422, E_VALIDATION, "Validation failed", {"errors": form.errors})
    return _error_response(502, E_SUBMIT_FAILED, form.alert or "Submit failed")


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/metrics")
async def metrics():
    if not monitoring.PROMETHEUS_ENABLED:
        return PlainTextResponse("Prometheus disabled", status_code=404)
    payload, content_type = monitoring.prometheus_metrics_response()
    return Response(content=payload, media_type=content_type)
