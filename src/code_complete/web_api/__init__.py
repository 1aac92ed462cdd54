"""
Code Complete Web API
=====================
FastAPI-based REST API around the scan pipeline.

Quick Start:
    uvicorn code_complete.web_api.main:app --reload
"""
from .main import app

__all__ = ["app"]
