"""
Common Dependencies for FastAPI Routes

`require_permission` is the server-side gate for data routers that back a
navigation module (chat, CRM, billing, ...). Those routers live outside this
service and declare the same `can_view_*` key the sidebar uses, e.g.
`dependencies=[Depends(require_permission("can_view_billing"))]`.
"""
import uuid

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import List, Callable

from teamaccess.database import get_db
from teamaccess.services.auth_service import decode_access_token
from teamaccess.services.permission_service import has_permission, permission_service
from teamaccess.models.user import User
from teamaccess.utils.exceptions import AuthenticationError, AuthorizationError, NotFoundError

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Dependency to get the current authenticated user
    """
    if credentials is None:
        raise AuthenticationError("Token não fornecido")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Token inválido ou expirado")

    user_id = payload.get("sub")
    if user_id is None:
        raise AuthenticationError("Token inválido ou expirado")

    user = db.query(User).filter(User.id == _as_uuid(user_id)).first()
    if user is None:
        raise AuthenticationError("Usuário não encontrado")

    if not user.is_active:
        raise AuthorizationError("Usuário inativo")

    return user


def _as_uuid(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise AuthenticationError("Token inválido ou expirado")


def require_role(allowed_roles: List[str]) -> Callable:
    """
    Dependency factory to require a membership role. Superadmins always pass.

    Usage:
        @router.get("/", dependencies=[Depends(require_role(["owner", "admin"]))])
        or
        current_user: User = Depends(require_role(["owner", "admin"]))
    """
    async def role_checker(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> User:
        if current_user.is_superadmin:
            return current_user

        membership = permission_service.get_membership(db, current_user.id)
        if membership is None or membership.role not in allowed_roles:
            raise AuthorizationError(f"Acesso negado. Perfis permitidos: {', '.join(allowed_roles)}")
        return current_user

    return role_checker


def require_permission(*keys: str) -> Callable:
    """
    Dependency factory to require specific permission(s), checked against the
    caller's effective vector (override row or role defaults).
    Superadmins always bypass the check.

    Usage:
        current_user: User = Depends(require_permission("can_view_billing"))
        or
        @router.get("/", dependencies=[Depends(require_permission("can_view_crm"))])
    """
    async def permission_checker(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> User:
        if current_user.is_superadmin:
            return current_user

        try:
            effective = permission_service.resolve_effective_permissions(db, current_user.id)
        except NotFoundError:
            raise AuthorizationError("Sem organização")

        for key in keys:
            if not has_permission(effective["permissions"], key):
                raise AuthorizationError(f"Permissão necessária: {key}")
        return current_user

    return permission_checker
