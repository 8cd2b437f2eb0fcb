"""FastAPI application entry point"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from trendgraph.config.settings import settings
from trendgraph.jobs.trend_job import ALL_SERIES, UnknownSeriesError, run_aggregated_trend, run_build_trend

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Aggregates per-build measurement series into chart-ready trend datasets",
    version=settings.APP_VERSION
)


class BuildPayload(BaseModel):
    number: int
    display_name: Optional[str] = None
    timestamp: int = Field(0, description="Build start time in epoch milliseconds")
    metrics: Dict[str, int] = Field(default_factory=dict)


class WindowPayload(BaseModel):
    build_count: Optional[int] = None
    day_count: Optional[int] = None
    use_build_date: Optional[bool] = None


class TrendRequest(WindowPayload):
    series: str = "severity"
    healthy: Optional[int] = None
    unhealthy: Optional[int] = None
    builds: List[BuildPayload] = Field(default_factory=list)


class HistoryPayload(WindowPayload):
    name: Optional[str] = None
    builds: List[BuildPayload] = Field(default_factory=list)


class AggregationRequest(WindowPayload):
    series: str = "severity"
    healthy: Optional[int] = None
    unhealthy: Optional[int] = None
    histories: List[HistoryPayload] = Field(default_factory=list)


def _run(job, payload: Dict[str, Any]) -> Dict[str, Any]:
    try:
        result = job(payload)
    except UnknownSeriesError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if not result["success"]:
        raise HTTPException(status_code=422, detail=result["errors"])
    return result


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "series": list(ALL_SERIES),
        "endpoints": {
            "health": "/api/health",
            "trend": "POST /api/trend",
            "aggregate": "POST /api/trend/aggregate"
        }
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "trendgraph",
        "version": settings.APP_VERSION
    }


@app.post("/api/trend")
def create_trend(request: TrendRequest):
    """Create the trend of a single build history"""
    logger.info(f"Trend requested for {len(request.builds)} builds")
    return _run(run_build_trend, request.model_dump(exclude_unset=True))


@app.post("/api/trend/aggregate")
def create_aggregated_trend(request: AggregationRequest):
    """Create one per-day trend over several build histories"""
    logger.info(f"Aggregated trend requested for {len(request.histories)} histories")
    return _run(run_aggregated_trend, request.model_dump(exclude_unset=True))
