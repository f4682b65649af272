from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TraversalSettings(BaseSettings):
    """Configuration for the traversal service.

    Environment variables are prefixed with KG_TRAVERSAL_.
    """

    model_config = SettingsConfigDict(env_prefix="KG_TRAVERSAL_", extra="ignore")

    # HTTP
    bind_host: str = "0.0.0.0"
    bind_port: int = 8090

    # Logging
    log_level: str = Field(default="INFO", description="Python logging level")

    # Auth
    api_key: str | None = Field(default=None, description="If set, require X-API-Key")
    auth_url: str | None = Field(
        default=None,
        description="If set, resolve callers via GET {auth_url}/me with their bearer token",
    )

    # Entity store
    store_url: str | None = Field(default=None, description="BaaS REST base URL")
    store_api_key: str | None = None
    node_entity: str = "KnowledgeGraphNode"
    relationship_entity: str = "KnowledgeGraphRelationship"
    snapshot_path: str | None = Field(
        default=None,
        description="JSON snapshot used when store_url is unset",
    )
    fetch_timeout_s: float = 30.0
    fetch_attempts: int = Field(default=3, description="Tries per backend read on transport errors")

    # Analysis
    default_max_depth: int = 5


settings = TraversalSettings()
