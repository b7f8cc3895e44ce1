from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    telegram_bot_token: str
    registry_repo_url: str = "https://github.com/Cordtus/chain-registry1.git"
    registry_dir: Path = Path(__file__).parent / "chain-registry1"
    stale_hours: float = 6
    page_size: int = Field(default=18, gt=0)
    session_idle_timeout: float = 300
    session_sweep_interval: float = 60
    incentives_api_url: str = "http://jasbanza.dedicated.co.za:7000"
    http_timeout: float = 30.0

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def stale_seconds(self) -> float:
        return self.stale_hours * 3600


settings = Settings()
