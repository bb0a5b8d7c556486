"""
ESAS Screening Service - FastAPI Application

Thin JSON boundary over the pure screening core:
- Classify a single ESAS submission
- Analyze a patient's screening history (trends, statistics, follow-up)
- Plan the next follow-up for a latest screening

No persistence, authentication or rendering happens here.
"""
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from palliative_screening import config
from palliative_screening.core.engine import ScreeningEngine, utc_now
from palliative_screening.core.history import ScreeningRecord
from palliative_screening.core.recommendation import default_catalog
from palliative_screening.core.scoring import Symptom
from palliative_screening.models import (
    ClassifyRequest,
    FollowUpRequest,
    HealthResponse,
    HistoryRequest,
    RecordInput,
    SymptomResponse,
)
from palliative_screening.utils import get_logger
from palliative_screening.utils.exceptions import (
    ConfigurationError,
    HistoryAnalysisError,
    ScoreRangeError,
    ScreeningError,
)

logger = get_logger(__name__)

_STATUS_CODES = {
    ScoreRangeError: 422,
    HistoryAnalysisError: 422,
    ConfigurationError: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Load the catalog up front so a defective table fails at startup
    catalog = default_catalog()
    logger.info(f"ESAS screening API ready (catalog {catalog.version})")
    yield
    logger.info("ESAS screening API shut down.")


app = FastAPI(
    title=config.API_TITLE,
    description="ESAS symptom classification and longitudinal screening analytics",
    version=config.API_VERSION,
    lifespan=lifespan,
)


@app.exception_handler(ScreeningError)
async def screening_error_handler(request: Request, exc: ScreeningError) -> JSONResponse:
    status_code = _STATUS_CODES.get(type(exc), 400)
    if status_code >= 500:
        logger.error(f"{request.url.path}: {exc.code} {exc.message}")
    else:
        logger.info(f"{request.url.path}: rejected ({exc.code})")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def _engine(now: Optional[datetime] = None, max_samples: Optional[int] = None, **kwargs) -> ScreeningEngine:
    clock = (lambda: now) if now is not None else utc_now
    return ScreeningEngine(catalog=default_catalog(), clock=clock, max_samples=max_samples, **kwargs)


def _to_record(engine: ScreeningEngine, item: RecordInput) -> ScreeningRecord:
    record = engine.screen(item.scores, record_id=item.record_id)
    # Keep the raw timestamp; the analytics decide whether it is usable
    return replace(record, timestamp=item.timestamp)


# ---- Health ----

@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=config.API_VERSION,
        catalog_version=default_catalog().version,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


# ---- Reference data ----

@app.get("/api/v1/symptoms", response_model=List[SymptomResponse])
async def list_symptoms() -> List[SymptomResponse]:
    return [
        SymptomResponse(number=int(s), label=s.label, description=s.description)
        for s in Symptom
    ]


@app.get("/api/v1/protocols")
async def list_protocols() -> Dict[str, Any]:
    return default_catalog().to_dict()


# ---- Screening ----

@app.post("/api/v1/screenings/classify")
async def classify_screening(request: ClassifyRequest) -> Dict[str, Any]:
    engine = _engine()
    record = engine.screen(request.scores, timestamp=request.timestamp, record_id=request.record_id)
    return record.to_dict()


# ---- History ----

@app.post("/api/v1/history/analyze")
async def analyze_history(request: HistoryRequest) -> Dict[str, Any]:
    engine = _engine(request.now, request.max_samples, trend_method=request.trend_method)
    records = [_to_record(engine, item) for item in request.records]
    return engine.analyze_history(records).to_dict()


@app.post("/api/v1/history/follow-up")
async def follow_up(request: FollowUpRequest) -> Dict[str, Any]:
    engine = _engine(request.now)
    classification, _ = engine.classify(request.scores)
    return engine.plan_follow_up(classification, request.last_timestamp, trend=request.trend).to_dict()


# ---- Run with uvicorn ----
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
