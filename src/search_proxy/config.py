from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": ""}

    google_api_key: str | None = None
    google_cx: str | None = None
    bing_api_key: str | None = None

    # seconds; 0 disables the bound
    upstream_timeout: float = 15.0

    duckduckgo_max_results: int = 10
    history_limit: int = 200
    max_body_bytes: int = 1024 * 1024

    cors_allow_origins: list[str] = ["*"]

    host: str = "0.0.0.0"
    port: int = 3000


settings = Settings()
