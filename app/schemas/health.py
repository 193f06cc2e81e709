"""Response schema for GET /health."""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Liveness plus database and schema readiness."""

    status: Literal["ok", "degraded"]
    version: str
    environment: str
    database: Literal["connected", "disconnected"]
    # False until the users/roles tables exist (run alembic or AUTO_CREATE_TABLES)
    schema_ready: bool
