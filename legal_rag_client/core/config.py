from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    APP_NAME: str = "legal-rag-client"
    ENV: str = "dev"

    API_URL: str = "http://localhost:5000"
    REQUEST_TIMEOUT_S: float = 60.0
    STREAM_TIMEOUT_S: float = 300.0

    MAX_FILES_PER_UPLOAD: int = 40
    MAX_FILE_SIZE_MB: int = 32
    ACCEPTED_EXTENSIONS: str = ".pdf,.doc,.docx,.txt"

    CHAT_HISTORY_LIMIT: int = 50
    LOGIN_REDIRECT_DELAY_S: float = 0.1

    # unset -> token only lives in memory for this process
    TOKEN_STORE_PATH: str | None = None

    LOG_LEVEL: str = "INFO"

    @property
    def max_file_size_bytes(self) -> int:
        return self.MAX_FILE_SIZE_MB * 1024 * 1024

    @property
    def accepted_extensions(self) -> list[str]:
        return [ext.strip().lower() for ext in self.ACCEPTED_EXTENSIONS.split(",") if ext.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
