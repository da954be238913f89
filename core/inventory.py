from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from pydantic import ValidationError

from .schema import Vehicle

logger = logging.getLogger(__name__)

INVENTORY_PATH = Path(__file__).resolve().parent.parent / "data" / "vehicles.json"
DEFAULT_PRICE_WINDOW = 1000
_INTEGER = re.compile(r"[+-]?\d+", re.ASCII)


class StoreError(Exception):
    """The backing file could not be read or does not hold a vehicle list."""


class JsonVehicleStore:
    """Vehicle collection backed by a JSON file, re-read on every access."""

    def __init__(self, path: Path | str = INVENTORY_PATH):
        self.path = Path(path)

    def load_all(self) -> List[Vehicle]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            logger.error("Vehicle data file not found: %s", self.path)
            raise StoreError(f"Vehicle data file not found: {self.path}") from exc
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Could not read vehicle data from %s: %s", self.path, exc)
            raise StoreError(f"Could not read vehicle data from {self.path}: {exc}") from exc

        if not isinstance(data, list):
            logger.error("Vehicle data in %s is not a list", self.path)
            raise StoreError(f"Vehicle data in {self.path} must be a list of records")
        try:
            return [Vehicle.model_validate(item) for item in data]
        except ValidationError as exc:
            logger.error("Invalid vehicle record in %s: %s", self.path, exc)
            raise StoreError(f"Invalid vehicle record in {self.path}") from exc

    def find_by_vrm(self, vrm: str) -> Optional[Vehicle]:
        wanted = vrm.strip().upper()
        for vehicle in self.load_all():
            if vehicle.vrm.upper() == wanted:
                return vehicle
        return None


@dataclass(frozen=True)
class SearchTerm:
    text: str
    number: Optional[int] = None

    @classmethod
    def parse(cls, query: str) -> "SearchTerm":
        text = query.strip().lower()
        if not text:
            raise ValueError("Search query must not be empty")
        number = int(text) if _INTEGER.fullmatch(text) else None
        return cls(text=text, number=number)


@dataclass(frozen=True)
class MatchRule:
    name: str
    predicate: Callable[[Vehicle, SearchTerm], bool]

    def __call__(self, vehicle: Vehicle, term: SearchTerm) -> bool:
        return self.predicate(vehicle, term)


def _contains(attr: str) -> Callable[[Vehicle, SearchTerm], bool]:
    def check(vehicle: Vehicle, term: SearchTerm) -> bool:
        return term.text in getattr(vehicle, attr).lower()
    return check


def _equals_number(attr: str) -> Callable[[Vehicle, SearchTerm], bool]:
    def check(vehicle: Vehicle, term: SearchTerm) -> bool:
        return term.number is not None and getattr(vehicle, attr) == term.number
    return check


def _price_within(window: int) -> Callable[[Vehicle, SearchTerm], bool]:
    def check(vehicle: Vehicle, term: SearchTerm) -> bool:
        return term.number is not None and abs(vehicle.price - term.number) <= window
    return check


def build_match_rules(
    price_window: int = DEFAULT_PRICE_WINDOW,
    match_registration_date: bool = True,
) -> List[MatchRule]:
    """Build the ordered rule list a vehicle is tested against.

    ``price_window`` is the absolute tolerance for the fuzzy price rule.
    The registration date is compared as raw text, not as a date; pass
    ``match_registration_date=False`` to leave it out entirely.
    """
    if price_window < 0:
        raise ValueError("price_window must not be negative")
    rules = [
        MatchRule("vrm", _contains("vrm")),
        MatchRule("make", _contains("make")),
        MatchRule("model", _contains("model")),
        MatchRule("variant", _contains("variant")),
        MatchRule("colour", _contains("colour")),
        MatchRule("body_type", _contains("body_type")),
        MatchRule("exact_price", _equals_number("price")),
        MatchRule("exact_mileage", _equals_number("mileage")),
        MatchRule("price_window", _price_within(price_window)),
    ]
    if match_registration_date:
        rules.append(MatchRule("registration_date", _contains("date_of_registration")))
    return rules


DEFAULT_RULES = build_match_rules()


def match_reasons(
    vehicle: Vehicle,
    query: str | SearchTerm,
    rules: Sequence[MatchRule] = DEFAULT_RULES,
) -> List[str]:
    term = query if isinstance(query, SearchTerm) else SearchTerm.parse(query)
    return [rule.name for rule in rules if rule(vehicle, term)]


def matches(
    vehicle: Vehicle,
    query: str | SearchTerm,
    rules: Sequence[MatchRule] = DEFAULT_RULES,
) -> bool:
    term = query if isinstance(query, SearchTerm) else SearchTerm.parse(query)
    return any(rule(vehicle, term) for rule in rules)


def search_vehicles(
    query: str,
    vehicles: Iterable[Vehicle],
    rules: Sequence[MatchRule] = DEFAULT_RULES,
) -> List[Vehicle]:
    term = SearchTerm.parse(query)
    return [vehicle for vehicle in vehicles if matches(vehicle, term, rules)]
