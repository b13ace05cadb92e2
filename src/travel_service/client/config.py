from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    API_BASE_URL: str = "http://localhost:8000"
    WS_PATH: str = "/ws"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    MESSAGE_POLL_SECONDS: float = 2.0
    CHECK_IN_POLL_SECONDS: float = 10.0

    WS_RECONNECT: bool = True
    WS_RECONNECT_BASE_SECONDS: float = 1.0
    WS_RECONNECT_MAX_SECONDS: float = 30.0

    model_config = SettingsConfigDict(
        env_prefix="TRAVEL_CLIENT_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def ws_url(self) -> str:
        return ws_url_for(self.API_BASE_URL, self.WS_PATH)


def ws_url_for(base_url: str, path: str = "/ws") -> str:
    """wss:// for https pages, ws:// otherwise."""
    parts = urlsplit(base_url)
    scheme = "wss" if parts.scheme == "https" else "ws"
    return urlunsplit((scheme, parts.netloc, path, "", ""))
