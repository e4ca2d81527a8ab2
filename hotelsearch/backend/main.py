"""FastAPI application entry point."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from hotelsearch.backend.core.config import settings
from hotelsearch.backend.core.logging import setup_logging
from hotelsearch.backend.db.init_db import init_db
from hotelsearch.backend.api import hotels
from hotelsearch.backend.api.errors import register_error_handlers


# Setup logging
setup_logging(settings.log_level)

# Initialize database
init_db()

# Create FastAPI app
app = FastAPI(
    title="Hotel Search API",
    description="Hotel directory, special pricing and geospatial search",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers
app.include_router(hotels.router, prefix="/api", tags=["hotels"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Hotel Search API", "version": "1.0.0"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
