from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3888
    CORS_ORIGIN: str = "http://localhost:3777"

    # App
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # JSON document storage (aliases.json, ai_configs.json)
    DATABASE_DIR: str = ""           # empty → ./data under the working dir
    STORE_CACHE: bool = True         # keep parsed documents in memory

    # AI providers
    AI_TIMEOUT: float = 60.0         # seconds, transport level only

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def data_dir(self) -> Path:
        if self.DATABASE_DIR:
            return Path(self.DATABASE_DIR)
        return Path.cwd() / "data"


settings = Settings()
