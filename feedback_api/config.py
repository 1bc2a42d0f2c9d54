"""Application configuration via environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    debug: bool = False
    environment: str = "development"

    # CORS (the feedback form is served from a separate origin)
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # GitHub (issue tracker + repository_dispatch target)
    github_token: str = ""
    github_repo_owner: str = ""
    github_repo_name: str = ""
    github_api_url: str = "https://api.github.com"

    # Slack (notifications + interactive button callbacks)
    slack_bot_token: str = ""
    slack_channel_id: str = ""
    slack_signing_secret: str = ""
    slack_api_url: str = "https://slack.com/api"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    @property
    def github_configured(self) -> bool:
        return bool(self.github_token and self.github_repo_owner and self.github_repo_name)

    @property
    def slack_configured(self) -> bool:
        return bool(self.slack_bot_token and self.slack_channel_id)


@lru_cache
def get_settings() -> Settings:
    return Settings()
