"""
User Permission API
"""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from teamaccess.database import get_db
from teamaccess.dependencies import get_current_user, require_role
from teamaccess.models.user import User
from teamaccess.config.permissions import (
    ALL_PERMISSIONS, PERMISSION_GROUPS, PERMISSION_MANAGER_ROLES, ROLES, role_defaults,
)
from teamaccess.schemas.permission import (
    EffectivePermissionsResponse, MatchingTemplateResponse, PermissionCatalogResponse,
    PermissionGroupInfo, PermissionKeyInfo, PermissionsUpdate, SuccessResponse,
)
from teamaccess.services.permission_service import match_active_template, permission_service
from teamaccess.services.template_service import template_service
from teamaccess.utils.exceptions import UnexpectedError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/catalog", response_model=PermissionCatalogResponse)
async def get_permission_catalog(
    current_user: User = Depends(get_current_user),
):
    """Catalog groups and role default vectors, for rendering permission editors."""
    groups = [
        PermissionGroupInfo(
            title=title,
            items=[
                PermissionKeyInfo(key=key, label=info["label"], description=info["description"])
                for key, info in ALL_PERMISSIONS.items()
                if info["category"] == title
            ],
        )
        for title in PERMISSION_GROUPS
    ]
    return PermissionCatalogResponse(
        groups=groups,
        role_defaults={role: role_defaults(role) for role in ROLES},
    )


@router.get("/me", response_model=EffectivePermissionsResponse)
async def get_my_permissions(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Effective permissions of the caller. Superadmins get every key."""
    try:
        return permission_service.resolve_for_user(db, current_user)
    except SQLAlchemyError:
        logger.exception("Get own permissions failed for user %s", current_user.id)
        raise UnexpectedError("Erro ao buscar permissões")


@router.get("/{user_id}", response_model=EffectivePermissionsResponse)
async def get_user_permissions(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Effective permissions of a user: their override if present, else role defaults."""
    try:
        return permission_service.resolve_effective_permissions(db, user_id)
    except SQLAlchemyError:
        logger.exception("Get permissions failed for user %s", user_id)
        raise UnexpectedError("Erro ao buscar permissões")


@router.put("/{user_id}", response_model=SuccessResponse)
async def update_user_permissions(
    user_id: UUID,
    data: PermissionsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Patch a user's override. Only the keys sent are written."""
    if data.permissions is None:
        raise ValidationError("Permissões são obrigatórias")

    try:
        permission_service.apply_override(
            db, current_user, user_id, data.permissions.model_dump(exclude_none=True),
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Update permissions failed for user %s", user_id)
        raise UnexpectedError("Erro ao atualizar permissões")
    return SuccessResponse()


@router.delete("/{user_id}", response_model=SuccessResponse)
async def reset_user_permissions(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Drop a user's override so role defaults apply again."""
    try:
        permission_service.reset_override(db, current_user, user_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Reset permissions failed for user %s", user_id)
        raise UnexpectedError("Erro ao resetar permissões")
    return SuccessResponse()


@router.post("/{user_id}/apply-template/{template_id}", response_model=EffectivePermissionsResponse)
async def apply_permission_template(
    user_id: UUID,
    template_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Copy a template onto a user's override and return the new effective vector."""
    try:
        return permission_service.apply_template(db, current_user, user_id, template_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Apply template %s failed for user %s", template_id, user_id)
        raise UnexpectedError("Erro ao aplicar template")


@router.get("/{user_id}/matching-template", response_model=MatchingTemplateResponse)
async def get_matching_template(
    user_id: UUID,
    current_user: User = Depends(require_role(list(PERMISSION_MANAGER_ROLES))),
    db: Session = Depends(get_db),
):
    """Template whose vector equals the user's effective vector, if any."""
    try:
        effective = permission_service.resolve_effective_permissions(db, user_id)
        templates = template_service.list_templates(db, current_user)
    except SQLAlchemyError:
        logger.exception("Template match failed for user %s", user_id)
        raise UnexpectedError("Erro ao buscar permissões")

    match = match_active_template(effective["permissions"], templates)
    return MatchingTemplateResponse(template_id=match.id if match else None)
