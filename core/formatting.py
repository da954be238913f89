from __future__ import annotations

from datetime import datetime

from .schema import Vehicle


def format_price(price: int) -> str:
    sign = "-" if price < 0 else ""
    return f"{sign}£{abs(price):,}"


def format_mileage(mileage: int) -> str:
    return f"{mileage:,} miles"


def format_registration_date(value: str) -> str:
    """Render ``YYYY-MM-DD`` as ``14 Mar 2018``; anything else is returned as is."""
    try:
        parsed = datetime.strptime(value.strip(), "%Y-%m-%d")
    except ValueError:
        return value
    return f"{parsed.day} {parsed.strftime('%b %Y')}"


def vehicle_title(vehicle: Vehicle, with_variant: bool = False) -> str:
    parts = [vehicle.make, vehicle.model]
    if with_variant:
        parts.append(vehicle.variant)
    return " ".join(p for p in parts if p)
