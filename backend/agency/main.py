from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session
import logging

import sentry_sdk

from agency.auth import get_password_hash
from agency.config import settings
from agency.db import Base, SessionLocal, engine, get_db
from agency.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from agency.middleware.request_id import RequestIDMiddleware
from agency.middleware.security_headers import SecurityHeadersMiddleware
from agency.models import Role, User
from agency.routers import auth, clients, projects, webdoku
from agency.utils.logging import configure_logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        traces_sample_rate=0.1,
        environment=settings.ENVIRONMENT,
    )
    logger.info("Sentry error tracking initialized")


def seed_admin_user(db: Session) -> None:
    """Create the configured admin account if it does not exist yet."""
    if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        return
    existing = db.query(User).filter(User.email == settings.ADMIN_EMAIL).first()
    if existing:
        return
    db.add(User(
        name="Admin",
        email=settings.ADMIN_EMAIL,
        password_hash=get_password_hash(settings.ADMIN_PASSWORD),
        role=Role.ADMIN,
        is_active=True,
    ))
    db.commit()
    logger.info("Admin user created: %s", settings.ADMIN_EMAIL)


app = FastAPI(
    title=settings.APP_NAME,
    description="Client, hosting and website project administration for the agency",
    version="1.0.0"
)

app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

allowed_origins = settings.cors_origins_list
if settings.FRONTEND_URL and settings.FRONTEND_URL not in allowed_origins:
    allowed_origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
    max_age=3600,
)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(SecurityHeadersMiddleware)


@app.on_event("startup")
async def startup_event():
    logger.info("Starting %s...", settings.APP_NAME)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_admin_user(db)
    finally:
        db.close()


app.include_router(auth.router)
app.include_router(clients.router)
app.include_router(projects.router)
app.include_router(webdoku.router)


@app.get("/healthz")
def healthz():
    return {"status": "ok"}


@app.get("/readyz")
def readyz(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Readiness check failed: %s", e)
        raise HTTPException(status_code=503, detail="Database not reachable")
    return {"status": "ok"}


@app.get("/")
def read_root():
    return {"name": settings.APP_NAME, "version": "1.0.0"}
