"""Role endpoints: CRUD plus the users holding a role."""

import logging

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

from userroles.api.v1.deps import Directory, RoleBody, RoleId
from userroles.schemas.role import RoleResponse
from userroles.schemas.user import UserProfile

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[RoleResponse])
def list_roles(directory: Directory) -> list[RoleResponse]:
    logger.info("Request received to list all roles")
    return directory.list_roles()


@router.get("/{role_id}", response_model=RoleResponse)
def get_role(role_id: RoleId, directory: Directory) -> RoleResponse:
    logger.info("Request received to get role id=%s", role_id)
    return directory.get_role(role_id)


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
def create_role(body: RoleBody, directory: Directory) -> RoleResponse:
    logger.info("Request received to create role name=%s", body.role_name)
    return directory.create_role(body)


@router.put("/{role_id}", response_model=RoleResponse)
def update_role(role_id: RoleId, body: RoleBody, directory: Directory) -> RoleResponse:
    logger.info("Request received to update role id=%s", role_id)
    return directory.update_role(role_id, body)


@router.delete("/{role_id}", response_class=PlainTextResponse)
def delete_role(role_id: RoleId, directory: Directory) -> PlainTextResponse:
    """Delete the role together with every assignment referencing it."""
    logger.info("Request received to delete role id=%s", role_id)
    if not directory.delete_role(role_id):
        return PlainTextResponse(
            "Could not delete the role",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return PlainTextResponse("Role deleted successfully")


@router.get("/{role_id}/users", response_model=list[UserProfile])
def list_role_users(role_id: RoleId, directory: Directory) -> list[UserProfile]:
    """
    Users holding the role, ascending by userId.

    Returns base user attributes only; each user's own role list is not loaded.
    """
    logger.info("Request received to list users for role id=%s", role_id)
    return directory.list_users_for_role(role_id)
