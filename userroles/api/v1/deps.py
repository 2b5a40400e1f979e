"""Request dependencies: the shared directory service, validated path ids and JSON bodies."""

import json
import logging
import re
from typing import Annotated, TypeVar

import pydantic
from fastapi import Depends, Request

from userroles.core.config import Settings
from userroles.core.errors import ValidationError
from userroles.schemas.common import MAX_IDENTITY
from userroles.schemas.role import RoleRequest
from userroles.schemas.user import UserRequest
from userroles.services.directory import DirectoryService

logger = logging.getLogger(__name__)

# Path identities are non-negative decimal integers; no sign, no whitespace.
IDENTITY_PATTERN = re.compile(r"[0-9]+", re.ASCII)

BodyModel = TypeVar("BodyModel", bound=pydantic.BaseModel)


def get_directory(request: Request) -> DirectoryService:
    """The service built once by the application factory."""
    return request.app.state.directory


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def parse_identity(raw: str, label: str) -> int:
    """Parse a path identity or raise ValidationError."""
    if not IDENTITY_PATTERN.fullmatch(raw) or int(raw) > MAX_IDENTITY:
        logger.warning("Invalid %s id: %r", label, raw)
        raise ValidationError(f"Invalid {label} id: {raw}")
    return int(raw)


def user_id_path(user_id: str) -> int:
    return parse_identity(user_id, "user")


def role_id_path(role_id: str) -> int:
    return parse_identity(role_id, "role")


async def _read_json(request: Request) -> object:
    raw = await request.body()
    if not raw.strip():
        raise ValidationError("Please provide the data in the request body")
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"Invalid JSON: {e!s}") from e


def _validate_body(model: type[BodyModel], data: object) -> BodyModel:
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        )
        logger.warning("Rejected %s body: %s", model.__name__, details)
        raise ValidationError(f"Invalid request body: {details}") from e


async def user_body(request: Request) -> UserRequest:
    return _validate_body(UserRequest, await _read_json(request))


async def role_body(request: Request) -> RoleRequest:
    return _validate_body(RoleRequest, await _read_json(request))


Directory = Annotated[DirectoryService, Depends(get_directory)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
UserId = Annotated[int, Depends(user_id_path)]
RoleId = Annotated[int, Depends(role_id_path)]
UserBody = Annotated[UserRequest, Depends(user_body)]
RoleBody = Annotated[RoleRequest, Depends(role_body)]
