import logging
from datetime import datetime, timezone
from fastapi import FastAPI, Depends, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import ALLOWED_ORIGINS, LOG_LEVEL, DATA_BACKEND
from core.exceptions import NotFoundError, ValidationError
from database.repository import Repository, get_repository
from routes import auth, employees, signals, genai, hr_actions


# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Initialize FastAPI
app = FastAPI(
    title="Smart HR Portal API",
    description="HR management service with attrition risk scoring and AI-assisted insights",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    logger.info(f"Not found on {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.info(f"Rejected write on {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


# ===== ROUTES =====
app.include_router(auth.router)
app.include_router(employees.router)
app.include_router(signals.router)
app.include_router(genai.router)
# Registered last: its /hr/{entity} routes would otherwise shadow the ones above
app.include_router(hr_actions.router)


@app.get("/")
async def root():
    return {
        "message": "Smart HR Portal API v1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check(repository: Repository = Depends(get_repository)):
    """Health check endpoint"""
    try:
        repository.find('employees', limit=1)
        return {
            "status": "healthy",
            "database": DATA_BACKEND,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(e)
        }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
