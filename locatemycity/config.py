"""Centralised application settings loaded from environment / .env file."""

from pathlib import Path

from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    # Static datasets (loaded once at startup)
    data_dir: Path = PROJECT_ROOT / "data"
    rock_cities_file: str = "rock_cities.json"
    spring_cities_file: str = "spring_cities.json"
    color_cities_file: str = "color-cities.json"
    old_cities_file: str = "old_cities.json"
    cities_file: str = "cities.json"

    # CORS
    allowed_origins: list[str] = [
        "http://localhost:3000",
        "https://locatemycity.com",
    ]

    # Proximity queries
    default_radius_miles: float = 25.0
    default_epsilon_miles: float = 1.0
    rate_limit: str = "100/minute"  # per client address

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
