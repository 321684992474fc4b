from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).parent
DEFAULT_CATALOG = BASE_DIR / "data.json"

# Bundled sample catalog for each rule set; unit types must match the rule set
BUNDLED_CATALOGS = {
    "elite_weight": DEFAULT_CATALOG,
    "champion_cap": BASE_DIR / "data_champion_cap.json",
}


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_prefix="FALL_BUILDER_", env_file=".env", extra="ignore")

    app_name: str = "Fall Builder"

    # Local path or http(s) URL; unset means the bundled catalog for rule_set
    catalog_source: Optional[str] = None
    catalog_timeout: float = 10.0

    # "elite_weight" or "champion_cap", see fall_builder.rules
    rule_set: str = "elite_weight"
    default_points_limit: int = 300

    @property
    def resolved_catalog_source(self) -> str:
        if self.catalog_source:
            return self.catalog_source
        return str(BUNDLED_CATALOGS.get(self.rule_set, DEFAULT_CATALOG))


settings = Settings()
