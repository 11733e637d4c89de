"""
Query parameter validation for the proximity endpoints.

Every value arrives as the raw query-string text (or ``None`` when absent)
and is validated by a frozen pydantic query model.  Any
``pydantic.ValidationError`` is re-raised as ``InvalidParameter``; the API
layer turns that into a 400 response.

A present-but-unparseable optional value (``radiusMiles``, ``epsilon``) is
rejected the same way as a required one rather than silently replaced by
its default.  Absent or blank optional values take their defaults from
``settings``.
"""

import re
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, Field, ValidationError

from locatemycity.config import settings

# plain decimal / scientific notation only: no underscores, hex, inf or nan
_NUMBER_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


class InvalidParameter(ValueError):
    """Raised when a query parameter is missing, non-numeric or out of range."""

    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(message)


def _numeric_text(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip()
        if not _NUMBER_RE.fullmatch(text):
            raise ValueError(f"must be a number, got {value!r}")
        return float(text)
    return value


Number = Annotated[float, BeforeValidator(_numeric_text)]


class NearQuery(BaseModel):
    lat: Number = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lon: Number = Field(..., ge=-180, le=180, allow_inf_nan=False)
    radius_miles: Number = Field(..., ge=0, allow_inf_nan=False, alias="radiusMiles")

    model_config = {"frozen": True, "populate_by_name": True}


class ExactQuery(BaseModel):
    lat: Number = Field(..., ge=-90, le=90, allow_inf_nan=False)
    lon: Number = Field(..., ge=-180, le=180, allow_inf_nan=False)
    target_miles: Number = Field(..., allow_inf_nan=False, alias="miles")
    epsilon: Number = Field(..., ge=0, allow_inf_nan=False)

    model_config = {"frozen": True, "populate_by_name": True}


def _present(raw: dict[str, Optional[str]]) -> dict[str, str]:
    """Drop absent and blank values so they count as missing."""
    return {k: v for k, v in raw.items() if v is not None and str(v).strip()}


def _invalid(exc: ValidationError) -> InvalidParameter:
    error = exc.errors()[0]
    name = str(error["loc"][0]) if error["loc"] else "query"
    if error["type"] == "missing":
        return InvalidParameter(name, f"Missing required parameter '{name}'")
    message = error["msg"].removeprefix("Value error, ")
    return InvalidParameter(name, f"Invalid parameter '{name}': {message}")


def parse_near_query(
    lat: Optional[str],
    lon: Optional[str],
    radius_miles: Optional[str] = None,
    default_radius: Optional[float] = None,
) -> NearQuery:
    data: dict[str, Any] = _present(
        {"lat": lat, "lon": lon, "radiusMiles": radius_miles}
    )
    data.setdefault(
        "radiusMiles",
        settings.default_radius_miles if default_radius is None else default_radius,
    )
    try:
        return NearQuery.model_validate(data)
    except ValidationError as exc:
        raise _invalid(exc) from None


def parse_exact_query(
    lat: Optional[str],
    lon: Optional[str],
    miles: Optional[str],
    epsilon: Optional[str] = None,
    default_epsilon: Optional[float] = None,
) -> ExactQuery:
    data: dict[str, Any] = _present(
        {"lat": lat, "lon": lon, "miles": miles, "epsilon": epsilon}
    )
    data.setdefault(
        "epsilon",
        settings.default_epsilon_miles if default_epsilon is None else default_epsilon,
    )
    try:
        return ExactQuery.model_validate(data)
    except ValidationError as exc:
        raise _invalid(exc) from None
