"""Configuration settings for the repairer lead pipeline."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Paths
    base_dir: Path = Path(__file__).parent.parent
    data_dir: Path = base_dir / "data"
    db_path: Path = data_dir / "repairers.db"
    database_url: str = ""  # overrides the SQLite file when set

    # API Keys
    serper_api_key: str = ""
    deepseek_api_key: str = ""
    mistral_api_key: str = ""
    perplexity_api_key: str = ""

    # Provider endpoints
    serper_url: str = "https://google.serper.dev/search"
    deepseek_url: str = "https://api.deepseek.com/v1/chat/completions"
    mistral_url: str = "https://api.mistral.ai/v1/chat/completions"
    perplexity_url: str = "https://api.perplexity.ai/chat/completions"
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"

    # Models
    deepseek_model: str = "deepseek-chat"
    mistral_model: str = "mistral-small"
    perplexity_model: str = "llama-3.1-sonar-small-128k-online"

    # HTTP Client Settings
    connect_timeout: float = 10.0
    read_timeout: float = 30.0
    geocoder_user_agent: str = "MultiAI-Pipeline/2.0"
    geocode_delay: float = 1.0  # seconds after every Nominatim call

    # Search Settings
    search_locale: str = "fr"
    search_num_results: int = 20
    country_code: str = "fr"
    country_name: str = "France"

    # Pipeline Settings
    classification_threshold: float = 0.5
    validation_limit: int = 10

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.db_path}"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@dataclass(frozen=True)
class ProviderKeys:
    """Credentials for the external providers, one per pipeline stage.

    An empty key degrades its stage to the fallback or no-op behaviour,
    except for the search key which is mandatory.
    """

    search_key: str = ""
    classifier_key: str = ""
    enricher_key: str = ""
    validator_key: str = ""

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "ProviderKeys":
        source = source or settings
        return cls(
            search_key=source.serper_api_key,
            classifier_key=source.deepseek_api_key,
            enricher_key=source.mistral_api_key,
            validator_key=source.perplexity_api_key,
        )


settings = Settings()

# Ensure data directory exists
settings.data_dir.mkdir(parents=True, exist_ok=True)
