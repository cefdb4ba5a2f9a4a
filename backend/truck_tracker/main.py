import asyncio
import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from truck_tracker.config import settings
from truck_tracker.errors import InvalidInputError, TrackerError
from truck_tracker.routers import trucks

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - [TRACKER] - %(levelname)s - %(name)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Truck Tracker")
# Set once the startup task has verified the tables
app.state.db_ready = False


async def create_tables():
    from truck_tracker.db import engine, Base
    # Register the models on Base.metadata
    from truck_tracker import models  # noqa: F401

    retries = settings.DB_CONNECT_RETRIES
    for attempt in range(1, retries + 1):
        try:
            logger.info("Connecting to database (attempt %d/%d)", attempt, retries)
            async with asyncio.timeout(30):
                async with engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
            logger.info("Database connected and tables verified")
            app.state.db_ready = True
            return
        except Exception as e:
            logger.warning("Database attempt %d failed: %s", attempt, e)
            if attempt < retries:
                await asyncio.sleep(settings.DB_RETRY_DELAY)

    logger.error("Database unreachable after %d attempts", retries)


@app.on_event("startup")
async def startup_event():
    # Table creation runs in the background so the server answers immediately
    asyncio.create_task(create_tables())


@app.exception_handler(TrackerError)
async def tracker_exception_handler(request: Request, exc: TrackerError):
    return JSONResponse(status_code=exc.status, content=jsonable_encoder(exc.to_body()))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    error = InvalidInputError("Invalid request body", details={"errors": errors})
    return JSONResponse(status_code=error.status, content=jsonable_encoder(error.to_body()))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = TrackerError("Internal Server Error")
    return JSONResponse(status_code=error.status, content=error.to_body())


@app.get("/")
async def root():
    return {"message": "Truck Tracker is running"}

# The dashboard polls from another origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(trucks.router)

if __name__ == "__main__":
    uvicorn.run("truck_tracker.main:app", host="0.0.0.0", port=8000, reload=True)
