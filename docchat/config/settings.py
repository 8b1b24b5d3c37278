from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    store_backend: str = "memory"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docchat"
    db_username: str = "docchat"
    db_password: str = "secret"

    max_upload_size_mb: int = 15
    keep_file_preview: bool = True

    pdf_engine: str = "pdfplumber"

    ocr_language: str = "eng"
    ocr_min_text_length: int = 10

    vision_provider: str = "openai"
    vision_max_tokens: int = 1000

    vision_openai_api_key: str = ""
    vision_openai_model_name: str = "gpt-4o-mini"
    vision_openai_timeout_seconds: int = 30

    vision_openrouter_api_key: str = ""
    vision_openrouter_model_name: str = "openai/gpt-4o-mini"
    vision_openrouter_timeout_seconds: int = 30

    vision_openai_compatible_api_key: str = ""
    vision_openai_compatible_model_name: str = ""
    vision_openai_compatible_base_url: str = ""
    vision_openai_compatible_timeout_seconds: int = 30

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024
