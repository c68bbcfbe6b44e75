import secrets
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .logger import logger
from .plugin import ProfilePlugin

bearer_scheme = HTTPBearer(auto_error=False)


def get_plugin(request: Request) -> ProfilePlugin:
    return request.app.state.plugin


def verify_token(
    plugin: Annotated[ProfilePlugin, Depends(get_plugin)],
    credentials: Annotated[
        Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)
    ],
) -> None:
    """Require the configured API token, if one is configured."""
    expected = plugin.settings.api_token
    if not expected:
        return
    if credentials is None or not secrets.compare_digest(
        credentials.credentials, expected
    ):
        logger.warning("Rejected request with missing or invalid API token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API token",
            headers={"WWW-Authenticate": "Bearer"},
        )
