"""Domain enumerations for the named city datasets."""

import enum


class DatasetName(str, enum.Enum):
    ROCK = "rock"
    SPRING = "spring"
    COLOR = "color"
    OLD = "old"


# Key used for each dataset in the combined stats payload
STATS_KEYS: dict[DatasetName, str] = {
    DatasetName.ROCK: "rockCities",
    DatasetName.SPRING: "springCities",
    DatasetName.COLOR: "colorCities",
    DatasetName.OLD: "oldCities",
}
