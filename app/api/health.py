"""Health check: database reachability and whether the account tables exist."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import inspect
from sqlalchemy.orm import Session

from app.core.config import APP_VERSION, settings
from app.core.database import check_db_connected, get_db
from app.models import Base
from app.schemas.health import HealthResponse

router = APIRouter()


def _schema_ready(db: Session) -> bool:
    present = set(inspect(db.connection()).get_table_names())
    return set(Base.metadata.tables).issubset(present)


@router.get("/health", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """
    Public check for load balancers. Reports "degraded" when the database is
    unreachable or registration would fail for lack of tables.
    """
    connected = check_db_connected(db)
    schema_ready = connected and _schema_ready(db)
    return HealthResponse(
        status="ok" if schema_ready else "degraded",
        version=APP_VERSION,
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
        schema_ready=schema_ready,
    )
