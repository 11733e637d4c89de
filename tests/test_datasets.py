"""
Tests for fail-soft dataset loading and the dataset store.

Every source is loaded independently: a missing or corrupt file degrades
only its own dataset to empty and is reported through ``load_errors``.
"""

from pathlib import Path

import pytest

from locatemycity.config import Settings
from locatemycity.domain.enums import DatasetName
from locatemycity.infrastructure.loader import load_flat_source, load_grouped_source
from locatemycity.infrastructure.repositories import DatasetStore


class TestLoadFlatSource:
    def test_loads_array(self, write_json):
        path = write_json(
            "cities.json",
            [
                {"name": "A", "lat": 0, "lon": 0, "country": "Testland"},
                {"name": "B", "latitude": 0, "longitude": 1},
            ],
        )
        result = load_flat_source(path)
        assert result.ok
        assert [c.name for c in result.dataset] == ["A", "B"]

    def test_missing_file(self, tmp_path: Path):
        result = load_flat_source(tmp_path / "cities.json")
        assert result.dataset == ()
        assert result.error is not None
        assert result.error.source == "cities.json"

    def test_corrupt_json(self, tmp_path: Path):
        path = tmp_path / "cities.json"
        path.write_text("[{not json", encoding="utf-8")
        result = load_flat_source(path)
        assert result.dataset == ()
        assert not result.ok

    def test_wrong_shape(self, write_json):
        result = load_flat_source(write_json("cities.json", {"Ohio": []}))
        assert result.dataset == ()
        assert "expected a JSON array" in result.error.message

    def test_malformed_items_are_skipped(self, write_json, caplog):
        path = write_json(
            "cities.json",
            [{"name": "A", "lat": 0, "lon": 0}, {"name": "broken"}, "junk"],
        )
        result = load_flat_source(path)
        assert result.ok
        assert [c.name for c in result.dataset] == ["A"]
        assert "Skipping item 1" in caplog.text


class TestLoadGroupedSource:
    def test_mapping_shape(self, write_json):
        path = write_json(
            "spring_cities.json",
            {
                "Colorado": [{"name": "Colorado Springs", "lat": 38.8, "lon": -104.8}],
                "Arkansas": [{"name": "Hot Springs", "lat": 34.5, "lon": -93.0}],
            },
        )
        result = load_grouped_source("spring", path)
        assert result.ok
        assert not result.dataset.flat_source
        assert result.dataset.group_keys() == ["Arkansas", "Colorado"]
        assert result.dataset.get_group("Colorado")[0].state == "Colorado"

    def test_array_shape_groups_by_state(self, write_json):
        path = write_json(
            "rock_cities.json",
            [
                {"name": "Little Rock", "state": "Arkansas", "lat": 34.7, "lon": -92.3},
                {"name": "No State", "lat": 1, "lon": 1},
                {"name": "Round Rock", "state": "Texas", "lat": 30.5, "lon": -97.7},
            ],
        )
        dataset = load_grouped_source("rock", path).dataset
        assert dataset.flat_source
        assert [r.name for r in dataset.flatten()] == ["Little Rock", "Round Rock"]

    def test_non_array_group_is_skipped(self, write_json):
        path = write_json(
            "old_cities.json",
            {"Maine": [{"name": "Old Town", "lat": 44.9, "lon": -68.6}], "Bad": 3},
        )
        dataset = load_grouped_source("old", path).dataset
        assert dataset.group_keys() == ["Maine"]

    def test_missing_file_keeps_expected_shape(self, tmp_path: Path):
        result = load_grouped_source("rock", tmp_path / "rock.json", flat_source=True)
        assert not result.ok
        assert result.dataset.listing() == []
        result = load_grouped_source("color", tmp_path / "color.json")
        assert result.dataset.listing() == {}

    def test_scalar_json(self, write_json):
        result = load_grouped_source("color", write_json("color-cities.json", 42))
        assert len(result.dataset) == 0
        assert "expected a JSON object or array" in result.error.message


class TestDatasetStore:
    def test_one_bad_source_does_not_block_others(self, tmp_path: Path, write_json):
        write_json(
            "rock_cities.json",
            [{"name": "Little Rock", "state": "Arkansas", "lat": 34.7, "lon": -92.3}],
        )
        write_json(
            "spring_cities.json",
            {"Arkansas": [{"name": "Hot Springs", "lat": 34.5, "lon": -93.0}]},
        )
        (tmp_path / "color-cities.json").write_text("{oops", encoding="utf-8")
        write_json("cities.json", [{"name": "A", "lat": 0, "lon": 0}])
        # old_cities.json deliberately missing

        store = DatasetStore.from_settings(Settings(data_dir=tmp_path))

        assert not store.healthy
        assert {e.source for e in store.load_errors} == {
            "color-cities.json",
            "old_cities.json",
        }
        assert len(store.get_grouped_dataset("rock")) == 1
        assert len(store.get_grouped_dataset("spring")) == 1
        assert len(store.get_grouped_dataset("color")) == 0
        assert [c.name for c in store.get_flat_cities()] == ["A"]

    def test_ships_with_sample_data(self):
        store = DatasetStore.from_settings(Settings())
        assert store.healthy
        assert len(store.get_flat_cities()) > 0
        for name in DatasetName:
            assert len(store.get_grouped_dataset(name)) > 0

    def test_accessors(self, store: DatasetStore):
        assert store.get_group_keys(DatasetName.SPRING) == ["Arkansas", "Colorado"]
        assert store.get_group_keys("rock") == ["Arkansas", "Illinois", "Texas"]
        assert [r.name for r in store.get_group("spring", "Arkansas")] == ["Hot Springs"]
        assert store.get_group("spring", "Atlantis") == ()

    def test_unknown_dataset(self, store: DatasetStore):
        with pytest.raises(KeyError):
            store.get_grouped_dataset("volcano")

    def test_build_fills_missing_datasets(self):
        store = DatasetStore.build()
        assert store.healthy
        assert store.get_flat_cities() == ()
        assert store.get_grouped_dataset("rock").listing() == []
        assert store.get_grouped_dataset("old").listing() == {}
        assert store.get_group_keys("color") == []

    def test_stats(self, store: DatasetStore):
        stats = store.stats()
        assert (stats[DatasetName.ROCK].total, stats[DatasetName.ROCK].states) == (4, 3)
        assert stats[DatasetName.OLD].total == 0
