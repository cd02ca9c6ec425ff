from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    """

    github_token: str | None = None
    github_api_base_url: str = "https://api.github.com"
    github_web_base_url: str = "https://github.com"
    contributions_url_template: str = (
        "https://github-contributions-api.deno.dev/{handle}.json"
    )
    user_agent: str = "matrixjava-dev-portfolio"
    request_timeout_seconds: float = 15.0

    default_user: str = "MatrixJava"
    default_org: str = "ByteBashersLabs"

    static_dir: str = "static"
    dist_dir: str = "dist"
    content_dir: str = "content"
    resume_url: str | None = None

    log_level: str = "INFO"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1
    rate_limit_per_minute: int = 30
    rate_limit_window_seconds: int = 60

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
