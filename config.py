import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # API settings
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "3000"))

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Book Collection API")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # CLI client settings
    client_timeout: float = float(os.getenv("CLIENT_TIMEOUT", "10"))

    @property
    def base_url(self) -> str:
        return f"http://{self.api_host}:{self.api_port}"


settings = Settings()
