from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RESUDOC_", extra="ignore")

    service_name: str = "Resudoc Document Service"
    log_level: str = "INFO"
    max_document_bytes: int = 10 * 1024 * 1024
    pdf_title: str = "Optimized CV"
    pdf_subtitle: str = "This is an optimized version of your CV"


settings = Settings()
