from fastapi import APIRouter

from food_ordering.core.metrics import request_metrics

router = APIRouter(prefix="/api/internal", tags=["internal"])


@router.get("/metrics")
def read_metrics():
    return {"requests": request_metrics.snapshot()}
