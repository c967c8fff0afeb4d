"""
Configuration management for the JIVAS graph explorer
"""

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Remote graph service
    jivas_host: str = Field(default="http://localhost:8000", description="Base URL of the JIVAS server")
    jivas_token: Optional[str] = Field(default=None, description="Bearer token sent with every walker call")
    root_node: str = Field(default="", description="Node the viewer session starts from")
    request_timeout: float = Field(default=30.0)

    # Traversal defaults
    default_mode: str = Field(default="Step", description="Full, Step or Focus")

    # Server
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8100)
    debug: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Traversal modes shown in the explorer
TRAVERSAL_MODES = {
    "Full": "Whole graph reachable from the root in one call",
    "Step": "Neighborhood of the focus node, previous discoveries kept",
    "Focus": "Neighborhood of the focus node only",
}

# Walker endpoints on the remote server
WALKER_ENDPOINTS = {
    "full_graph": "/walker/get_graph",
    "neighborhood": "/walker/get_node_connections",
}
