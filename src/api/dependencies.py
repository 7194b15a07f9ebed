"""
FastAPI dependencies: caller identity, admin check and the DI container
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Request

from src.infrastructure.container.dependency_injection import DependencyContainer, get_container
from src.infrastructure.logging.logging_config import security_logger
from src.infrastructure.utilities.exceptions import AuthenticationError, PermissionDeniedError


@dataclass(frozen=True)
class CurrentUser:
    """Identity forwarded by the upstream identity layer"""

    uid: str
    email: Optional[str] = None
    name: Optional[str] = None


def container_dependency(request: Request) -> DependencyContainer:
    container = getattr(request.app.state, "container", None)
    return container or get_container()


def get_current_user(
    user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
    user_email: Optional[str] = Header(default=None, alias="X-User-Email"),
    user_name: Optional[str] = Header(default=None, alias="X-User-Name"),
) -> CurrentUser:
    if not user_id or not user_id.strip():
        raise AuthenticationError()
    return CurrentUser(uid=user_id.strip(), email=user_email or None, name=user_name or None)


def require_admin(
    request: Request,
    user: CurrentUser = Depends(get_current_user),
    container: DependencyContainer = Depends(container_dependency),
) -> CurrentUser:
    allowed = user.uid in container.config.admin_user_ids
    security_logger.log_access_attempt(user.uid, request.url.path, allowed, {"method": request.method})
    if not allowed:
        raise PermissionDeniedError()
    return user
