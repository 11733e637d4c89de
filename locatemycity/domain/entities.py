"""
Domain entities for the static city datasets.

Patterns used
-------------
- ``CityRecord`` is an immutable **Value Object**: it is built once by the
  loader and never changes afterwards.
- ``GroupedDataset`` is the single parametrised abstraction behind the
  rock / spring / color / old datasets: ``listing``, ``flatten``,
  ``group_keys`` and ``get_group`` work the same for every one of them.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Optional

LATITUDE_KEYS = ("latitude", "lat")
LONGITUDE_KEYS = ("longitude", "lon", "lng")
_KNOWN_KEYS = frozenset(
    ("name", "country", "state", *LATITUDE_KEYS, *LONGITUDE_KEYS)
)


class InvalidRecord(ValueError):
    """Raised when a raw dataset item cannot be turned into a CityRecord."""


def _coordinate(item: Mapping[str, Any], keys: tuple[str, ...]) -> float:
    for key in keys:
        if key not in item:
            continue
        value = item[key]
        if isinstance(value, bool):
            break
        try:
            number = float(value)
        except (TypeError, ValueError):
            break
        if not math.isfinite(number):
            break
        return number
    raise InvalidRecord(f"missing or non-numeric {keys[0]}")


# ── Value Object ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class CityRecord:
    name: str
    latitude: float
    longitude: float
    country: Optional[str] = None
    state: Optional[str] = None
    extra: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}), compare=False, hash=False
    )

    @classmethod
    def from_mapping(
        cls, item: Mapping[str, Any], state: Optional[str] = None
    ) -> CityRecord:
        """Build a record from one raw JSON item.

        ``state`` overrides whatever the item carries; grouped sources pass
        their group key here so every record knows which group it came from.
        """
        if not isinstance(item, Mapping):
            raise InvalidRecord(f"expected an object, got {type(item).__name__}")
        name = item.get("name")
        if not isinstance(name, str) or not name.strip():
            raise InvalidRecord("missing name")

        latitude = _coordinate(item, LATITUDE_KEYS)
        longitude = _coordinate(item, LONGITUDE_KEYS)
        if not -90.0 <= latitude <= 90.0:
            raise InvalidRecord(f"latitude out of range: {latitude}")
        if not -180.0 <= longitude <= 180.0:
            raise InvalidRecord(f"longitude out of range: {longitude}")

        country = item.get("country")
        if state is None:
            state = item.get("state")
        extra = {k: v for k, v in item.items() if k not in _KNOWN_KEYS}
        return cls(
            name=name,
            latitude=latitude,
            longitude=longitude,
            country=str(country) if country is not None else None,
            state=str(state) if state is not None else None,
            extra=MappingProxyType(extra),
        )

    def with_state(self, state: str) -> CityRecord:
        return replace(self, state=state)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        data["name"] = self.name
        data["latitude"] = self.latitude
        data["longitude"] = self.longitude
        if self.country is not None:
            data["country"] = self.country
        if self.state is not None:
            data["state"] = self.state
        return data


@dataclass(frozen=True)
class DatasetStats:
    total: int
    states: int


# ── Grouped dataset ───────────────────────────────────────────────────


@dataclass(frozen=True)
class GroupedDataset:
    """Cities of one classification, grouped by state.

    ``records`` keeps the source order; ``groups`` maps each state to its
    records in that same order.  ``flat_source`` remembers whether the
    source file was a flat array (rock cities) so ``listing`` can echo the
    original shape.
    """

    name: str
    records: tuple[CityRecord, ...] = ()
    groups: Mapping[str, tuple[CityRecord, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    flat_source: bool = False

    @classmethod
    def from_groups(
        cls, name: str, groups: Mapping[str, Iterable[CityRecord]]
    ) -> GroupedDataset:
        stamped: dict[str, tuple[CityRecord, ...]] = {}
        for key, members in groups.items():
            stamped[key] = tuple(r.with_state(key) for r in members)
        records = tuple(r for members in stamped.values() for r in members)
        return cls(name=name, records=records, groups=MappingProxyType(stamped))

    @classmethod
    def from_records(
        cls, name: str, records: Iterable[CityRecord]
    ) -> GroupedDataset:
        ordered = tuple(records)
        grouped: dict[str, list[CityRecord]] = {}
        for record in ordered:
            if record.state is None:
                raise InvalidRecord(f"{record.name!r} has no state")
            grouped.setdefault(record.state, []).append(record)
        return cls(
            name=name,
            records=ordered,
            groups=MappingProxyType({k: tuple(v) for k, v in grouped.items()}),
            flat_source=True,
        )

    @classmethod
    def empty(cls, name: str, flat_source: bool = False) -> GroupedDataset:
        return cls(name=name, flat_source=flat_source)

    def __len__(self) -> int:
        return len(self.records)

    def flatten(self) -> tuple[CityRecord, ...]:
        return self.records

    def group_keys(self) -> list[str]:
        return sorted(self.groups)

    def get_group(self, key: str) -> tuple[CityRecord, ...]:
        return self.groups.get(key, ())

    def listing(self) -> list[CityRecord] | dict[str, list[CityRecord]]:
        """Return the dataset in the shape its source file used."""
        if self.flat_source:
            return list(self.records)
        return {key: list(members) for key, members in self.groups.items()}

    def stats(self) -> DatasetStats:
        return DatasetStats(total=len(self.records), states=len(self.groups))
