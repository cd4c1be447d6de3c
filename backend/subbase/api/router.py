"""
Main API router.
"""

from fastapi import APIRouter
from subbase.api import subscriptions, ai

api_router = APIRouter()

api_router.include_router(subscriptions.router)
api_router.include_router(ai.router)
