"""
Fail-soft JSON loading for the static datasets.

Each source is read independently and produces a ``LoadResult``: either the
parsed dataset, or an empty dataset together with the ``LoadError`` that
caused it.  Nothing in here raises for bad input; a broken file must never
stop the other datasets (or the application) from starting.

Individual items that cannot be parsed are skipped with a warning.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generic, Iterable, Optional, TypeVar

from locatemycity.domain.entities import CityRecord, GroupedDataset, InvalidRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class LoadError:
    source: str
    message: str


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    dataset: T
    error: Optional[LoadError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _read_json(path: Path) -> Any:
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


def _parse_items(
    items: Iterable[Any], source: str, state: Optional[str] = None
) -> list[CityRecord]:
    records: list[CityRecord] = []
    for index, item in enumerate(items):
        try:
            records.append(CityRecord.from_mapping(item, state=state))
        except InvalidRecord as exc:
            logger.warning("Skipping item %d in %s: %s", index, source, exc)
    return records


def _failed(source: str, message: str, empty: T) -> LoadResult[T]:
    logger.error("Error loading %s: %s", source, message)
    return LoadResult(dataset=empty, error=LoadError(source=source, message=message))


def load_flat_source(path: Path) -> LoadResult[tuple[CityRecord, ...]]:
    """Load a JSON array of cities."""
    source = path.name
    try:
        raw = _read_json(path)
    except (OSError, ValueError) as exc:
        return _failed(source, str(exc), ())

    if not isinstance(raw, list):
        return _failed(
            source, f"expected a JSON array, got {type(raw).__name__}", ()
        )
    records = tuple(_parse_items(raw, source))
    logger.info("Loaded %d cities from %s", len(records), source)
    return LoadResult(dataset=records)


def load_grouped_source(
    name: str, path: Path, flat_source: bool = False
) -> LoadResult[GroupedDataset]:
    """Load a state-grouped dataset.

    Accepts either a JSON object mapping state -> array of cities, or a flat
    JSON array whose items carry their own ``state``.  ``flat_source`` only
    decides the shape of the empty fallback when the file cannot be read.
    """
    source = path.name
    empty = GroupedDataset.empty(name, flat_source=flat_source)
    try:
        raw = _read_json(path)
    except (OSError, ValueError) as exc:
        return _failed(source, str(exc), empty)

    if isinstance(raw, dict):
        groups: dict[str, list[CityRecord]] = {}
        for state, items in raw.items():
            if not isinstance(items, list):
                logger.warning(
                    "Skipping group %r in %s: expected an array", state, source
                )
                continue
            groups[state] = _parse_items(items, f"{source}[{state}]", state=state)
        dataset = GroupedDataset.from_groups(name, groups)
    elif isinstance(raw, list):
        parsed = _parse_items(raw, source)
        records = [r for r in parsed if r.state is not None]
        if len(records) < len(parsed):
            logger.warning(
                "Skipping %d items without a state in %s",
                len(parsed) - len(records),
                source,
            )
        dataset = GroupedDataset.from_records(name, records)
    else:
        return _failed(
            source,
            f"expected a JSON object or array, got {type(raw).__name__}",
            empty,
        )

    logger.info(
        "Loaded %d %s cities across %d states from %s",
        len(dataset),
        name,
        len(dataset.groups),
        source,
    )
    return LoadResult(dataset=dataset)
