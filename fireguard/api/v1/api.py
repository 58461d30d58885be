"""
FireGuard API Router Configuration
Main router that includes all API endpoints.
"""
from fastapi import APIRouter

from fireguard.api.v1 import risk

api_router = APIRouter()

api_router.include_router(risk.router, prefix="/risk", tags=["risk"])
