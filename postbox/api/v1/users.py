"""User management routes"""

from fastapi import APIRouter, Depends, status

from postbox.api.deps import get_current_user_id, get_user_service
from postbox.schemas.user import UserCredentials, UserResponse
from postbox.services.user_service import UserService

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCredentials,
    users: UserService = Depends(get_user_service)
):
    """
    Sign up

    Args:
        user_data: Email and password

    Returns:
        Created user
    """
    return users.create_user(user_data.email, user_data.password)


@router.put("", response_model=UserResponse)
def update_user(
    user_data: UserCredentials,
    user_id: int = Depends(get_current_user_id),
    users: UserService = Depends(get_user_service)
):
    """
    Replace the authenticated user's email and password

    Returns:
        Updated user
    """
    return users.change_credentials(user_id, user_data.email, user_data.password)
