"""Pydantic-powered validation helpers for preference inputs."""

from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from meteopanel.core.exceptions import ValidationError


class CoordinatesModel(BaseModel):
    """Latitude/longitude pair within the WGS84 ranges."""

    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)

    @classmethod
    def parse(cls, value: str) -> "CoordinatesModel":
        parts = value.replace(" ", "").split(",")
        if len(parts) != 2:
            raise ValidationError(f"Expected 'lat,lon', got '{value}'")
        return validate_payload(cls, lat=parts[0], lon=parts[1])

    def as_place(self) -> str:
        return f"{self.lat},{self.lon}"


class LocationInputModel(BaseModel):
    """A location entered on the locations page."""

    name: str = ""
    place: str

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        return value.strip()

    @field_validator("place")
    @classmethod
    def _normalize_place(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Place cannot be empty")
        if len(value) > 200:
            raise ValueError("Place is unexpectedly long")
        return value


class RefreshMinutesModel(BaseModel):
    """Spin button values for the refresh intervals, in minutes."""

    current: Optional[int] = Field(default=None, ge=10, le=1440)
    forecast: Optional[int] = Field(default=None, ge=30, le=1440)


ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_payload(model: Type[ModelT], **data: Any) -> ModelT:
    """Validate ``data`` against ``model`` and raise domain errors on failure."""

    try:
        return model.model_validate(data)
    except PydanticValidationError as err:
        message = "; ".join(detail["msg"] for detail in err.errors())
        raise ValidationError(message) from err


__all__ = [
    "CoordinatesModel",
    "LocationInputModel",
    "RefreshMinutesModel",
    "validate_payload",
]
