from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://standupsync:standupsync@db:5432/standupsync"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    # Gemini access. Without a key every AI path degrades to its fallback.
    GEMINI_API_KEY: str | None = None
    # Tried in order at startup; the first model that constructs is kept.
    GEMINI_MODELS: str = "gemini-1.5-flash,gemini-1.0-pro"
    AI_TIMEOUT_SECONDS: float = 30.0

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def gemini_models_list(self) -> list[str]:
        return [m.strip() for m in self.GEMINI_MODELS.split(",") if m.strip()]


settings = Settings()
