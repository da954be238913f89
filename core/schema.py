from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Vehicle(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    vrm: str = Field(alias="VRM")
    make: str = Field(alias="Make")
    model: str = Field(alias="Model")
    variant: str = Field(alias="Variant")
    colour: str = Field(alias="Colour")
    body_type: str = Field(alias="BodyType")
    price: int = Field(alias="Price")
    mileage: int = Field(alias="Mileage")
    date_of_registration: str = Field(alias="DateOfRegistration")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class SearchRequest(BaseModel):
    query: Optional[str] = None

    @field_validator("query", mode="before")
    @classmethod
    def _as_text(cls, value):
        # falsy values (0, false, "") count as a missing query
        if not value:
            return None
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            return value.strip() or None
        raise ValueError("query must be a string or a number")


class ViewState(str, Enum):
    idle = "idle"
    results = "results"
    empty = "empty"
    found = "found"
    not_found = "not_found"
    error = "error"


class SearchOutcome(BaseModel):
    state: ViewState
    vehicles: List[Vehicle] = Field(default_factory=list)
    message: Optional[str] = None


class DetailOutcome(BaseModel):
    state: ViewState
    vehicle: Optional[Vehicle] = None
    message: Optional[str] = None
