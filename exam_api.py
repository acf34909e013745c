"""
Exam Blueprint API — Main Application
FastAPI application for exam blueprints: chapter-wise mark distributions,
question paper validation, approval, and class subject configuration.
"""

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import os

from database.database import engine, Base
from database import models  # noqa: F401  (registers tables on Base.metadata)

from routers import blueprints, subject_masters, class_configurations, configuration_subjects, exam_configurations

logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)s  %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: create tables."""
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title="Exam Blueprint API",
    description="Exam blueprints, question paper validation, and class subject configuration",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─── Routers ───────────────────────────────────────────────────────────────────

# Reference data
app.include_router(subject_masters.router)       # /subject-masters/*
app.include_router(class_configurations.router)  # /class-configurations/*
app.include_router(configuration_subjects.router)  # /configuration-subjects/*
app.include_router(exam_configurations.router)   # /exam-configurations/*, /question-papers/*

# Blueprint engine
app.include_router(blueprints.router)            # /blueprints/*


@app.get("/")
def root():
    return {"status": "Online"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("exam_api:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=True)
