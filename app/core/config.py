from typing import Optional
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import PostgresDsn, RedisDsn


class PostgresSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    # A full DSN (e.g. a hosted Neon database) wins over the individual parts.
    url: Optional[str] = Field(default=None, alias="DATABASE_URL")
    host: str = Field(default="localhost", alias="POSTGRES_HOST")
    port: int = Field(default=5432, alias="POSTGRES_DB_PORT")
    db_name: str = Field(default="ankix", alias="POSTGRES_DB_NAME")
    user: str = Field(default="postgres", alias="POSTGRES_DB_USER")
    password: str = Field(default="postgres", alias="POSTGRES_DB_PASSWORD")

    @computed_field
    def connection_string(self) -> str:
        if self.url:
            dsn = self.url
            for prefix in ("postgresql://", "postgres://"):
                if dsn.startswith(prefix):
                    dsn = "postgresql+asyncpg://" + dsn[len(prefix):]
                    break
            return dsn
        return str(
            PostgresDsn(
                f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.db_name}"
            )
        )


class RedisSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    url: Optional[str] = Field(default=None, alias="REDIS_URL")
    host: str = Field(default="localhost", alias="REDIS_HOST")
    port: int = Field(default=6379, alias="REDIS_PORT")
    password: Optional[str] = Field(default=None, alias="REDIS_PASSWORD")
    db: int = Field(default=0, alias="REDIS_DB")

    @computed_field
    def dsn(self) -> str:
        if self.url:
            return self.url
        if self.password:
            return str(
                RedisDsn(f"redis://:{self.password}@{self.host}:{self.port}/{self.db}")
            )
        else:
            return str(RedisDsn(f"redis://{self.host}:{self.port}/{self.db}"))


class AnkiXServiceSettings(BaseSettings):
    """Remote service that turns documents into flashcards and import files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    base_url: str = Field(
        default="https://ankix.pythonanywhere.com", alias="ANKIX_API_URL"
    )
    process_path: str = Field(default="/process", alias="ANKIX_PROCESS_PATH")
    import_path: str = Field(default="/generate-import", alias="ANKIX_IMPORT_PATH")
    # None means no timeout; processing a document routinely takes a minute.
    timeout: Optional[float] = Field(default=None, alias="ANKIX_TIMEOUT")
    import_filename: str = Field(
        default="flashcards.apkg", alias="ANKIX_IMPORT_FILENAME"
    )

    @computed_field
    def process_url(self) -> str:
        return self.base_url.rstrip("/") + self.process_path

    @computed_field
    def import_url(self) -> str:
        return self.base_url.rstrip("/") + self.import_path


class EmailJSSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    api_url: str = Field(
        default="https://api.emailjs.com/api/v1.0/email/send", alias="EMAILJS_API_URL"
    )
    service_id: str = Field(default="service_tisfysq", alias="EMAILJS_SERVICE_ID")
    template_id: str = Field(default="template_igfu9n9", alias="EMAILJS_TEMPLATE_ID")
    public_key: str = Field(default="", alias="EMAILJS_PUBLIC_KEY")
    private_key: Optional[str] = Field(default=None, alias="EMAILJS_PRIVATE_KEY")
    status_reset_seconds: float = Field(default=3.0, alias="FEEDBACK_RESET_SECONDS")


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="ankix", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=9000, alias="APP_PORT")
    mode: str = Field(default="prod", alias="MODE")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"], alias="CORS_ORIGINS"
    )
    workspace_idle_seconds: int = Field(default=3600, alias="WORKSPACE_IDLE_SECONDS")

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"

    @computed_field
    def is_testing(self) -> bool:
        return self.mode == "test"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    postgres: PostgresSettings = Field(default_factory=lambda: PostgresSettings())
    redis: RedisSettings = Field(default_factory=lambda: RedisSettings())
    ankix: AnkiXServiceSettings = Field(default_factory=lambda: AnkiXServiceSettings())
    emailjs: EmailJSSettings = Field(default_factory=lambda: EmailJSSettings())


settings = Settings()
