"""
Main FastAPI application entry point.
"""

import logging

from fastapi import FastAPI

from app.config import get_settings
from app.api import router as api_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Loan EMI, income tax and salary calculators",
    version="0.1.0",
    debug=settings.debug,
)

# Include API routes
app.include_router(api_router, prefix="/api")

CALCULATORS = [
    {"name": "loan", "title": "Loan EMI Calculator", "path": "/api/calculate/loan"},
    {"name": "tax", "title": "Income Tax Estimator", "path": "/api/calculate/tax"},
    {"name": "salary", "title": "Salary Calculator", "path": "/api/calculate/salary"},
]


@app.get("/")
async def home():
    """List the available calculators."""
    return {"name": settings.app_name, "calculators": CALCULATORS}


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": "0.1.0"}


def run():
    """Run the API with uvicorn using the configured host and port."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
