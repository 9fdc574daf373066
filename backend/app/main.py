from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from sqlalchemy import text
from typing import List
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from app.config import get_settings, get_cors_origins
from app.database import get_db, engine, Base
from app import models  # noqa: F401  registers tables on Base.metadata
from app.routers import adsets, campaigns, creatives, insights, projects, videos


settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


cors_allow_origins: List[str] = get_cors_origins(settings)

if cors_allow_origins:
    logger.info(f"Allowing additional CORS origins: {cors_allow_origins}")


# Create tables
Base.metadata.create_all(bind=engine)

app = FastAPI(title="Ad Dashboard API", version="0.1.0")

# CORS configuration - allow frontend to communicate with backend
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"https?://localhost(:\d+)?$",
    allow_origins=cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api")
def api_info():
    """API information endpoint"""
    return {"message": "Ad Dashboard API", "version": "0.1.0"}


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Check if API and database are working"""
    try:
        # Test database connection
        db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Database error: {str(e)}")


app.include_router(projects.router)
app.include_router(campaigns.router)
app.include_router(adsets.router)
app.include_router(creatives.router)
app.include_router(videos.router)
app.include_router(insights.router)
