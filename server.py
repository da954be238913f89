from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, List

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from core.config import load_settings
from core.inventory import JsonVehicleStore, MatchRule, build_match_rules, search_vehicles
from core.logging_config import configure_logging
from core.schema import SearchRequest

settings = load_settings()
configure_logging(level=settings.log_level, fmt=settings.log_format)
logger = logging.getLogger("vehicle_search.api")

ENDPOINTS = {
    "getAllVehicles": "GET /api/vehicles",
    "getVehicleByVRM": "GET /api/vehicles/vrm/:vrm",
    "searchVehicles": "POST /api/vehicles/search",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Vehicle Search API started, data file %s", settings.data_path)
    for route in ENDPOINTS.values():
        logger.info("  %s", route)
    yield


app = FastAPI(title="Vehicle Search API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_store() -> JsonVehicleStore:
    return JsonVehicleStore(settings.data_path)


def get_match_rules() -> List[MatchRule]:
    return build_match_rules(
        price_window=settings.price_window,
        match_registration_date=settings.match_registration_date,
    )


def _server_error(message: str, exc: Exception) -> JSONResponse:
    return JSONResponse(
        {"success": False, "message": message, "error": str(exc)},
        status_code=500,
    )


@app.get("/")
async def index():
    return {"message": "Vehicle Search API is running", "endpoints": ENDPOINTS}


@app.get("/health")
async def health():
    return {"ok": True}


@app.get("/api/vehicles")
def list_vehicles(store: JsonVehicleStore = Depends(get_store)):
    try:
        vehicles = store.load_all()
    except Exception as exc:
        logger.exception("Listing vehicles failed")
        return _server_error("Error fetching vehicles", exc)
    return {
        "success": True,
        "count": len(vehicles),
        "data": [v.to_wire() for v in vehicles],
    }


@app.get("/api/vehicles/vrm/{vrm}")
def get_vehicle(vrm: str, store: JsonVehicleStore = Depends(get_store)):
    wanted = vrm.strip().upper()
    try:
        vehicle = store.find_by_vrm(wanted)
    except Exception as exc:
        logger.exception("Lookup of VRM %s failed", wanted)
        return _server_error("Error fetching vehicle", exc)
    if vehicle is None:
        return JSONResponse(
            {"success": False, "message": f"No vehicle found with VRM: {wanted}"},
            status_code=404,
        )
    return {"success": True, "data": vehicle.to_wire()}


SEARCH_PATH = "/api/vehicles/search"


def _query_required() -> JSONResponse:
    return JSONResponse(
        {"success": False, "message": "Search query is required"},
        status_code=400,
    )


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    # a search body that is not valid JSON gets the same 400 as a missing query
    if request.url.path == SEARCH_PATH:
        return _query_required()
    return await request_validation_exception_handler(request, exc)


@app.post(SEARCH_PATH)
def search(
    body: Any = Body(None),
    store: JsonVehicleStore = Depends(get_store),
    rules: List[MatchRule] = Depends(get_match_rules),
):
    try:
        query = SearchRequest.model_validate(body).query
    except ValidationError:
        query = None
    if not query:
        return _query_required()

    try:
        results = search_vehicles(query, store.load_all(), rules)
    except Exception as exc:
        logger.exception("Search for %r failed", query)
        return _server_error("Error searching vehicles", exc)

    logger.info("Search %r matched %d vehicle(s)", query, len(results))
    if not results:
        return JSONResponse(
            {
                "success": False,
                "message": f'No vehicles found matching: "{query}"',
                "data": [],
            },
            status_code=404,
        )
    return {
        "success": True,
        "count": len(results),
        "data": [v.to_wire() for v in results],
    }
