"""User endpoints: CRUD plus role assignment."""

import logging

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

from userroles.api.v1.deps import Directory, RoleId, UserBody, UserId
from userroles.core.errors import NotFoundError
from userroles.schemas.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[UserResponse])
def list_users(directory: Directory) -> list[UserResponse]:
    """Every user ascending by userId, each with its assigned roles."""
    logger.info("Request received to list all users")
    return directory.list_users()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: UserId, directory: Directory) -> UserResponse:
    logger.info("Request received to get user id=%s", user_id)
    return directory.get_user(user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(body: UserBody, directory: Directory) -> UserResponse:
    """
    Create a user. An embedded roles list ([{"roleId": 1}, ...]) is assigned
    after the user row exists; the response carries the roles as stored.
    """
    logger.info("Request received to create user username=%s", body.username)
    return directory.create_user(body)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: UserId, body: UserBody, directory: Directory) -> UserResponse:
    """Full replace of the user's attributes; a roles list replaces all assignments."""
    logger.info("Request received to update user id=%s", user_id)
    return directory.update_user(user_id, body)


@router.delete("/{user_id}", response_class=PlainTextResponse)
def delete_user(user_id: UserId, directory: Directory) -> PlainTextResponse:
    logger.info("Request received to delete user id=%s", user_id)
    if not directory.delete_user(user_id):
        return PlainTextResponse(
            "Could not delete the user",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return PlainTextResponse("User deleted successfully")


@router.post("/{user_id}/roles/{role_id}", response_class=PlainTextResponse)
def assign_role(user_id: UserId, role_id: RoleId, directory: Directory) -> PlainTextResponse:
    """Unknown user or role ids, and repeated assignments, fail as storage errors (500)."""
    logger.info("Request received to assign role id=%s to user id=%s", role_id, user_id)
    if not directory.assign_role_to_user(user_id, role_id):
        return PlainTextResponse(
            "Could not assign the role to the user",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return PlainTextResponse("Role assigned to user successfully")


@router.delete("/{user_id}/roles/{role_id}", response_class=PlainTextResponse)
def remove_role(user_id: UserId, role_id: RoleId, directory: Directory) -> PlainTextResponse:
    logger.info("Request received to remove role id=%s from user id=%s", role_id, user_id)
    if not directory.unassign_role_from_user(user_id, role_id):
        raise NotFoundError(f"Role id {role_id} is not assigned to user id {user_id}")
    return PlainTextResponse("Role removed from user successfully")
