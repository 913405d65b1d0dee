"""
Request-scoped dependencies shared by the routers.
"""
from typing import Optional

from fastapi import Header, Request

from standupsync.services.ai_gateway import AIAnalysisGateway


def get_gateway(request: Request) -> AIAnalysisGateway:
    """The gateway built once at startup (see the app lifespan)."""
    return request.app.state.gateway


def get_current_user_id(
    x_user_id: Optional[str] = Header(
        default=None,
        description="Authenticated user id, set by the auth layer in front of the API.",
    ),
) -> Optional[str]:
    if x_user_id is None:
        return None
    return x_user_id.strip() or None
