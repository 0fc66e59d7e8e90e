"""Authentication routes"""

from fastapi import APIRouter, Depends, Response, status

from postbox.api.deps import bearer_token, get_token_service, get_user_service
from postbox.core.exceptions import ResourceNotFoundError, TokenInvalidError
from postbox.core.security import create_access_token
from postbox.models.refresh_token import RefreshToken
from postbox.schemas.user import AccessTokenResponse, LoginResponse, UserCredentials
from postbox.services.token_service import TokenService
from postbox.services.user_service import UserService

router = APIRouter()


def _active_refresh_token(tokens: TokenService, token: str) -> RefreshToken:
    try:
        record = tokens.get_refresh_token(token)
    except ResourceNotFoundError:
        raise TokenInvalidError("The refresh token is invalid")
    if not tokens.is_active(record):
        raise TokenInvalidError("The refresh token is invalid")
    return record


@router.post("/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
def login(
    credentials: UserCredentials,
    users: UserService = Depends(get_user_service),
    tokens: TokenService = Depends(get_token_service)
):
    """
    Login endpoint - authenticate user and return access and refresh tokens

    Args:
        credentials: Email and password

    Returns:
        User info with tokens
    """
    user = users.authenticate_user(credentials.email, credentials.password)
    refresh = tokens.issue_refresh_token(user.id)

    return LoginResponse(
        id=user.id,
        email=user.email,
        is_upgraded=user.is_upgraded,
        token=create_access_token(user.id),
        refresh_token=refresh.token
    )


@router.post("/refresh", response_model=AccessTokenResponse)
def refresh(
    token: str = Depends(bearer_token),
    tokens: TokenService = Depends(get_token_service)
):
    """
    Exchange a live refresh token for a new access token
    """
    record = _active_refresh_token(tokens, token)
    return AccessTokenResponse(token=create_access_token(record.user_id))


@router.post("/revoke", status_code=status.HTTP_204_NO_CONTENT)
def revoke(
    token: str = Depends(bearer_token),
    tokens: TokenService = Depends(get_token_service)
):
    """
    Revoke a refresh token
    """
    record = _active_refresh_token(tokens, token)
    try:
        tokens.revoke_refresh_token(record.token)
    except ResourceNotFoundError:
        # Revoked concurrently by another request.
        raise TokenInvalidError("The refresh token is invalid")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
