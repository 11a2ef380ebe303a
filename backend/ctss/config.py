import os
import logging
from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field


# Load environment variables
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

LOGGER_NAME = "clinical_tables_search"


def _csv(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


class Settings(BaseModel):
    # upstream Clinical Table Search Service
    api_base_url: str = Field(
        default_factory=lambda: os.getenv("CLINICAL_API_BASE_URL", "https://clinicaltables.nlm.nih.gov")
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT", "15")), gt=0
    )
    user_agent: str = Field(
        default_factory=lambda: os.getenv("USER_AGENT", "clinical-tables-search/0.1.0")
    )

    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # HTTP API
    cors_origins: List[str] = Field(default_factory=lambda: _csv(os.getenv("CORS_ORIGINS", "*")))

    # MCP server
    mcp_transport: str = Field(default_factory=lambda: os.getenv("MCP_TRANSPORT", "stdio"))
    mcp_host: str = Field(default_factory=lambda: os.getenv("MCP_HOST", "0.0.0.0"))
    mcp_port: int = Field(default_factory=lambda: int(os.getenv("MCP_PORT", "8000")))
    mcp_http_path: str = Field(default_factory=lambda: os.getenv("MCP_HTTP_PATH", "/mcp"))

    def api_url(self, table: str) -> str:
        return f"{self.api_base_url.rstrip('/')}/api/{table}/v3/search"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def get_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    # enable a config:
    if not logging.getLogger().handlers:
        logging.basicConfig(level=get_settings().log_level, format="%(levelname)s %(message)s")
    return logger
