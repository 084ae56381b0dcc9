from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "SI_", "env_file": ".env", "env_file_encoding": "utf-8"}

    auth_username: str = Field(default="admin")
    auth_user_id: int = Field(default=1, ge=1)
    auth_password: str = Field(min_length=1)
    jwt_secret: str = Field(min_length=32)
    jwt_expire_minutes: int = Field(default=1440)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True)
    db_path: str = Field(default="score_import.db")
    cors_origins: str = Field(default="http://localhost:3000")

    # Import summary log severity
    import_log_high_threshold: int = Field(default=500, ge=1)
    import_log_medium_threshold: int = Field(default=1, ge=0)


settings = Settings()
