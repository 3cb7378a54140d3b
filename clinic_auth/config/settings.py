from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""  # anon key; the session core acts on behalf of the signed-in user

    # Tables read by the profile store
    profiles_table: str = "profiles"
    professional_profiles_table: str = "professional_profiles"

    # Password recovery links point back to the web client
    site_url: str = "http://localhost:5173"

    # App
    app_name: str = "clinic-auth"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def password_reset_redirect_url(self) -> str:
        return f"{self.site_url.rstrip('/')}/reset-password"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
