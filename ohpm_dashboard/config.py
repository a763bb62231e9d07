from functools import lru_cache
from typing import Optional

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    github_token: Optional[str] = Field(default=None, alias="GITHUB_TOKEN")
    github_base_url: HttpUrl = Field(
        default="https://api.github.com", alias="GITHUB_BASE_URL"
    )
    github_proxy: Optional[str] = Field(default=None, alias="GITHUB_PROXY")
    ohpm_base_url: HttpUrl = Field(
        default="https://ohpm.openharmony.cn/ohpmweb/registry/oh-package/openapi/v1",
        alias="OHPM_BASE_URL",
    )
    # package links in the rendered table point here, not at the API
    ohpm_web_url: str = Field(
        default="https://ohpm.openharmony.cn/#/cn/detail/", alias="OHPM_WEB_URL"
    )
    http_timeout: float = Field(default=20.0, alias="HTTP_TIMEOUT")
    fetch_concurrency: int = Field(default=4, ge=1, alias="FETCH_CONCURRENCY")
    cache_ttl_seconds: int = Field(default=3600, alias="CACHE_TTL_SECONDS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    attribution_url: str = Field(
        default="https://github.com/AmosHuKe/ohpm-dashboard", alias="ATTRIBUTION_URL"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"  # ignore unrelated env vars to avoid validation errors


@lru_cache
def get_settings() -> Settings:
    return Settings()
