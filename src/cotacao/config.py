"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class UpstreamSettings(BaseSettings):
    """External quote API settings."""

    model_config = SettingsConfigDict(env_prefix="UPSTREAM_")

    base_url: str = "https://economia.awesomeapi.com.br/json/last"
    pair: str = "USD-BRL"
    timeout_seconds: float = 0.2  # 200ms per upstream call

    @property
    def url(self) -> str:
        """Full endpoint for the configured pair, no query parameters."""
        return f"{self.base_url.rstrip('/')}/{self.pair}"

    @property
    def response_key(self) -> str:
        """Envelope key the API wraps the quote in (USD-BRL -> USDBRL)."""
        return self.pair.replace("-", "").upper()


class StoreSettings(BaseSettings):
    """Quote store settings.

    Disabling the store runs the non-persisting deployment of the service.
    """

    model_config = SettingsConfigDict(env_prefix="STORE_")

    enabled: bool = True
    db_path: str = ":memory:"
    timeout_seconds: float = 0.01  # 10ms per write


class ServerSettings(BaseSettings):
    """Quote service HTTP server configuration."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = "0.0.0.0"
    port: int = 8080


class ClientSettings(BaseSettings):
    """One-shot client settings."""

    model_config = SettingsConfigDict(env_prefix="CLIENT_")

    service_url: str = "http://localhost:8080/cotacao"
    timeout_seconds: float = 0.3  # 300ms from program start
    output_path: str = "cotacao.txt"


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    upstream: UpstreamSettings = UpstreamSettings()
    store: StoreSettings = StoreSettings()
    server: ServerSettings = ServerSettings()
    client: ClientSettings = ClientSettings()
