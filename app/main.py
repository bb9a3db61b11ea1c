from contextlib import asynccontextmanager
from fastapi import FastAPI
from dotenv import load_dotenv

load_dotenv()

from domain.config import get_database_config, get_explore_config
from application.service.decision_service import DecisionService
from infrastructure.db.database import AsyncSessionLocal, engine, init_models
from infrastructure.db.repositories.decision_store_sqlalchemy import DecisionStoreSqlalchemy
from infrastructure.logging.logging_adapter import LoggingAdapter
from infrastructure.logging.structlog_logs import logger
from infrastructure.metrics.metrics import metrics_endpoint
from infrastructure.metrics.metrics_adapter import MetricsAdapter
from app.routers.v1 import router


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_explore_config()
    if get_database_config().create_tables:
        await init_models()
    app.state.decision_service = DecisionService(
        decision_store=DecisionStoreSqlalchemy(AsyncSessionLocal),
        metrics_port=MetricsAdapter(),
        logging_port=LoggingAdapter(),
        mark_seen_timeout_seconds=config.mark_seen_timeout_seconds,
    )
    logger.info("explore_service_started", service_name=config.service_name)
    yield
    logger.info("explore_service_stopping", pending_background_tasks=app.state.decision_service.pending_background_tasks)
    await app.state.decision_service.drain(timeout=config.shutdown_drain_timeout_seconds)
    await engine.dispose()


app = FastAPI(title="explore-service", lifespan=lifespan)

@app.get("/metrics")
async def metrics():
    return metrics_endpoint()

@app.get("/health")
async def health():
    return {"status": "ok", "message": "explore-service is running"}

app.include_router(router)
