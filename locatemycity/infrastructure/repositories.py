"""
Repository Pattern -- read-only access to the in-memory datasets.

``DatasetStore`` is built exactly once (``from_settings``) before the API
serves any request and is then handed to the routes through ``app.state``.
It never changes after construction; every accessor returns immutable data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Union

from locatemycity.config import Settings
from locatemycity.domain.entities import CityRecord, DatasetStats, GroupedDataset
from locatemycity.domain.enums import DatasetName

from .loader import LoadError, load_flat_source, load_grouped_source

logger = logging.getLogger(__name__)

DatasetKey = Union[DatasetName, str]


def _dataset_name(name: DatasetKey) -> DatasetName:
    try:
        return DatasetName(name)
    except ValueError:
        raise KeyError(f"Unknown dataset: {name}") from None


@dataclass(frozen=True)
class DatasetStore:
    cities: tuple[CityRecord, ...] = ()
    grouped: Mapping[DatasetName, GroupedDataset] = field(
        default_factory=lambda: MappingProxyType({})
    )
    load_errors: tuple[LoadError, ...] = ()

    @classmethod
    def build(
        cls,
        cities: tuple[CityRecord, ...] = (),
        grouped: Mapping[DatasetKey, GroupedDataset] | None = None,
        load_errors: tuple[LoadError, ...] = (),
    ) -> DatasetStore:
        """Assemble a store; datasets not given are present but empty."""
        given = {_dataset_name(k): v for k, v in (grouped or {}).items()}
        full = {
            name: given[name]
            if name in given
            else GroupedDataset.empty(name.value, flat_source=name is DatasetName.ROCK)
            for name in DatasetName
        }
        return cls(
            cities=tuple(cities),
            grouped=MappingProxyType(full),
            load_errors=tuple(load_errors),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> DatasetStore:
        """Load every dataset file once.  One bad file never blocks the rest."""
        data_dir = settings.data_dir
        sources = {
            DatasetName.ROCK: settings.rock_cities_file,
            DatasetName.SPRING: settings.spring_cities_file,
            DatasetName.COLOR: settings.color_cities_file,
            DatasetName.OLD: settings.old_cities_file,
        }

        errors: list[LoadError] = []
        grouped: dict[DatasetName, GroupedDataset] = {}
        for name, filename in sources.items():
            result = load_grouped_source(
                name.value,
                data_dir / filename,
                flat_source=name is DatasetName.ROCK,
            )
            grouped[name] = result.dataset
            if result.error:
                errors.append(result.error)

        flat = load_flat_source(data_dir / settings.cities_file)
        if flat.error:
            errors.append(flat.error)

        store = cls.build(cities=flat.dataset, grouped=grouped, load_errors=tuple(errors))
        if errors:
            logger.warning(
                "Dataset store ready with %d load error(s): %s",
                len(errors),
                ", ".join(e.source for e in errors),
            )
        else:
            logger.info("Dataset store ready from %s", data_dir)
        return store

    # ── Accessors ─────────────────────────────────────────────────────

    def get_flat_cities(self) -> tuple[CityRecord, ...]:
        return self.cities

    def get_grouped_dataset(self, name: DatasetKey) -> GroupedDataset:
        return self.grouped[_dataset_name(name)]

    def get_group_keys(self, name: DatasetKey) -> list[str]:
        return self.get_grouped_dataset(name).group_keys()

    def get_group(self, name: DatasetKey, key: str) -> tuple[CityRecord, ...]:
        return self.get_grouped_dataset(name).get_group(key)

    def stats(self) -> dict[DatasetName, DatasetStats]:
        return {name: ds.stats() for name, ds in self.grouped.items()}

    @property
    def healthy(self) -> bool:
        return not self.load_errors
