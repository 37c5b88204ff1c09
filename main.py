from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from routes.trial_balance_routes import router as trial_balance_router
from database import create_tables
from config import CORS_ORIGINS
from utils.logger import logger

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()
    yield

app = FastAPI(
    title="Trial Balance Validation API",
    description="Month-end trial balance upload, validation and variance analysis",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Error bodies are {"error": message}"""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request fields are client errors, reported as 400"""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {problems}"})

# Register routes
app.include_router(trial_balance_router, tags=["Trial Balance"])

@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "message": "Trial Balance Validation API",
        "version": "1.0.0",
        "status": "running",
        "features": [
            "CSV and Excel trial balance upload",
            "Debit/credit balance check",
            "Account type detection",
            "Suspense and liability balance warnings",
            "Period-over-period variance analysis",
            "Excel report export"
        ]
    }

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "upload": "available",
            "validation": "available",
            "storage": "available"
        }
    }

if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Trial Balance Validation API...")
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
