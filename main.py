import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from beanie.exceptions import CollectionWasNotInitialized
from pymongo.errors import PyMongoError

import config
from database import connect_to_mongo, close_mongo_connection, ensure_beanie
from auth.routes import router as auth_router
from admin.routes import router as admin_router, seed_default_admin
from doctor.routes import router as doctor_router
from health_center.routes import router as health_center_router
from appointment.routes import router as appointment_router
from user.routes import router as user_router
from message.routes import router as message_router
from notification.routes import router as notification_router
from reminder.routes import router as reminder_router
from health.routes import router as health_router
from utils.storage import ensure_upload_dir

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Tabib IQ API", version="1.0.0")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials="*" not in config.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Origin", "Accept", "X-Requested-With"],
)


@app.middleware("http")
async def retry_database_init(request: Request, call_next):
    if request.url.path.startswith("/api/"):
        await ensure_beanie()
    return await call_next(request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(PyMongoError)
@app.exception_handler(CollectionWasNotInitialized)
async def database_exception_handler(request: Request, exc: Exception):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Database unavailable"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.on_event("startup")
async def startup():
    ensure_upload_dir()
    try:
        await connect_to_mongo()
        await seed_default_admin()
    except PyMongoError as e:
        # Keep serving so /api/health can report the outage
        logger.error(f"MongoDB connection error: {e}")


@app.on_event("shutdown")
async def shutdown():
    close_mongo_connection()


@app.get("/")
async def root():
    return {"message": "Tabib IQ API is running!", "version": app.version, "health": "/api/health"}


# Uploaded images and documents
app.mount("/uploads", StaticFiles(directory=config.UPLOAD_DIR, check_dir=False), name="uploads")

# All Routes Endpoint Setup
app.include_router(health_router, prefix="/api", tags=["health"])
app.include_router(auth_router, prefix="/api", tags=["auth"])
app.include_router(user_router, prefix="/api", tags=["user"])
app.include_router(doctor_router, prefix="/api", tags=["doctor"])
app.include_router(health_center_router, prefix="/api", tags=["health-center"])
app.include_router(admin_router, prefix="/api", tags=["admin"])
app.include_router(appointment_router, prefix="/api", tags=["appointment"])
app.include_router(notification_router, prefix="/api", tags=["notification"])
app.include_router(message_router, prefix="/api", tags=["message"])
app.include_router(reminder_router, prefix="/api", tags=["medicine-reminder"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
