from __future__ import annotations

import logging
from urllib.parse import quote

import requests

from .schema import DetailOutcome, SearchOutcome, Vehicle, ViewState

logger = logging.getLogger(__name__)


class VehicleApiClient:
    """Talks to the Vehicle Search API and folds each response into a page state.

    Network failures and non-JSON bodies come back as an ``error`` outcome
    carrying a message instead of raising.
    """

    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _unreachable(self, action: str) -> str:
        return f"Failed to {action}. Please ensure the API server is running at {self.base_url}."

    def search(self, query: str) -> SearchOutcome:
        if not query or not query.strip():
            return SearchOutcome(state=ViewState.error, message="Please enter a search term")
        try:
            resp = requests.post(
                f"{self.base_url}/api/vehicles/search",
                json={"query": query.strip()},
                timeout=self.timeout,
            )
            payload = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Search request failed: %s", exc)
            return SearchOutcome(state=ViewState.error, message=self._unreachable("search vehicles"))
        return self._list_outcome(resp.status_code, payload, f'No vehicles found matching: "{query.strip()}"')

    def list_all(self) -> SearchOutcome:
        try:
            resp = requests.get(f"{self.base_url}/api/vehicles", timeout=self.timeout)
            payload = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("List request failed: %s", exc)
            return SearchOutcome(state=ViewState.error, message=self._unreachable("fetch vehicles"))
        return self._list_outcome(resp.status_code, payload, "No vehicles available")

    def _list_outcome(self, status: int, payload: dict, empty_message: str) -> SearchOutcome:
        if status == 404:
            return SearchOutcome(state=ViewState.empty, message=payload.get("message") or empty_message)
        if status >= 400 or not payload.get("success"):
            return SearchOutcome(
                state=ViewState.error,
                message=payload.get("message") or "Failed to fetch vehicles",
            )
        vehicles = [Vehicle.model_validate(item) for item in payload.get("data") or []]
        if not vehicles:
            return SearchOutcome(state=ViewState.empty, message=empty_message)
        return SearchOutcome(state=ViewState.results, vehicles=vehicles)

    def get_vehicle(self, vrm: str) -> DetailOutcome:
        try:
            resp = requests.get(
                f"{self.base_url}/api/vehicles/vrm/{quote(vrm.strip(), safe='')}",
                timeout=self.timeout,
            )
            payload = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Detail request for %s failed: %s", vrm, exc)
            return DetailOutcome(state=ViewState.error, message=self._unreachable("fetch vehicle details"))
        if resp.status_code == 404:
            return DetailOutcome(
                state=ViewState.not_found,
                message=payload.get("message") or f"No vehicle found with VRM: {vrm}",
            )
        if resp.status_code >= 400 or not payload.get("success"):
            return DetailOutcome(
                state=ViewState.error,
                message=payload.get("message") or "Vehicle not found",
            )
        return DetailOutcome(state=ViewState.found, vehicle=Vehicle.model_validate(payload["data"]))
