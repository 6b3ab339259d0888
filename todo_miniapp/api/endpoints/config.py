"""
Client Config Endpoint.

Public settings the Mini App front end needs before login.
"""

from fastapi import APIRouter, Request

from todo_miniapp.core.config import get_app_config
from todo_miniapp.schemas.auth import ClientConfigResponse

router = APIRouter()


@router.get(
    "",
    response_model=ClientConfigResponse,
    summary="Client configuration",
    description="Bot username and public app URL.",
)
async def get_client_config(request: Request) -> ClientConfigResponse:
    """``appUrl`` falls back to the URL this request came in on."""
    telegram = get_app_config().application.telegram
    app_url = telegram.app_url or str(request.base_url).rstrip("/")
    return ClientConfigResponse(botUsername=telegram.bot_username, appUrl=app_url)
