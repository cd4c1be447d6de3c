"""
FastAPI dependencies.
"""

import uuid
from typing import Optional
from fastapi import Header

from subbase.database import get_db
from subbase.errors import UnauthorizedError
from subbase.services.insights_service import InsightsGenerator

__all__ = ["get_db", "get_current_user_id", "get_insights_generator"]


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """
    Identify the owner of the request.

    The identity is resolved upstream and forwarded in the X-User-Id header;
    every store call is scoped by this value.
    """
    if not x_user_id:
        raise UnauthorizedError()
    try:
        return str(uuid.UUID(x_user_id))
    except ValueError:
        raise UnauthorizedError("Invalid user identity")


def get_insights_generator() -> InsightsGenerator:
    return InsightsGenerator()
