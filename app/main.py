import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import init_db
from app.api import bookings, reminders, routes, sms
from app.exception_handlers import register_exception_handlers
from app.services.scheduler import start_scheduler, stop_scheduler


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


configure_logging()
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(routes.router)
app.include_router(routes.admin)
app.include_router(bookings.router)
app.include_router(reminders.router)
app.include_router(sms.router)
app.include_router(sms.webhooks)


@app.on_event("startup")
async def startup_event():
    """Create tables and start the optional reminder scheduler"""
    init_db()
    start_scheduler()
    logger.info(f"{settings.app_name} started ({settings.environment})")


@app.on_event("shutdown")
async def shutdown_event():
    """Stop background scheduler on app shutdown"""
    stop_scheduler()
    logger.info(f"{settings.app_name} stopped")


@app.get("/")
def read_root():
    return {
        "message": f"Welcome to {settings.app_name}",
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
