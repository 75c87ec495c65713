# app/api/routers/health.py
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.data.database import ping
from app.domain.schemas import HealthOut
from app.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthOut)
def health(request: Request):
    try:
        ping(request.app.state.engine)
    except SQLAlchemyError as e:
        logger.warning(f"Health check failed: {e}")
        return JSONResponse(status_code=503, content={"status": "degraded", "database": "unavailable"})
    return {"status": "ok", "database": "ok"}
