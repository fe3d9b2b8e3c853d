"""
Permission Template Service

Templates created by a superadmin are global; templates created by an owner
belong to the owner's organization. Every member sees the global templates
plus those of their own organization.
"""
import logging
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from teamaccess.config.permissions import DEFAULT_TEMPLATE_ICON, PERMISSION_KEYS, TEMPLATE_MANAGER_ROLES
from teamaccess.models.permission_template import PermissionTemplate
from teamaccess.models.user import User
from teamaccess.schemas.permission_template import TemplateCreate, TemplateUpdate
from teamaccess.services.permission_service import permission_service
from teamaccess.utils.exceptions import AuthorizationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _clean_permissions(permissions: Dict[str, bool]) -> Dict[str, bool]:
    """Keep only catalog keys."""
    return {key: bool(value) for key, value in permissions.items() if key in PERMISSION_KEYS}


class TemplateService:

    def _caller_organization_id(self, db: Session, caller: User) -> Optional[UUID]:
        membership = permission_service.get_membership(db, caller.id)
        return membership.organization_id if membership else None

    def list_templates(self, db: Session, caller: User) -> List[PermissionTemplate]:
        """Templates visible to ``caller``, ordered by sort_order then created_at."""
        query = db.query(PermissionTemplate)
        if not caller.is_superadmin:
            org_id = self._caller_organization_id(db, caller)
            if org_id is None:
                query = query.filter(PermissionTemplate.organization_id.is_(None))
            else:
                query = query.filter(or_(
                    PermissionTemplate.organization_id.is_(None),
                    PermissionTemplate.organization_id == org_id,
                ))
        return query.order_by(PermissionTemplate.sort_order.asc(), PermissionTemplate.created_at.asc()).all()

    def ensure_can_manage(self, db: Session, caller: User) -> Optional[UUID]:
        """Require superadmin or organization owner.

        Returns the organization new templates belong to (None = global).
        """
        if caller.is_superadmin:
            return None
        membership = permission_service.get_membership(db, caller.id)
        if membership is None or membership.role not in TEMPLATE_MANAGER_ROLES:
            logger.warning("User %s denied template management", caller.id)
            raise AuthorizationError("Apenas superadmins ou proprietários podem gerenciar templates")
        return membership.organization_id

    def _get_editable(self, db: Session, caller: User, template_id: UUID) -> PermissionTemplate:
        org_id = self.ensure_can_manage(db, caller)
        template = db.query(PermissionTemplate).filter(PermissionTemplate.id == template_id).first()
        if template is None:
            raise NotFoundError("Template não encontrado")
        if not caller.is_superadmin and template.organization_id != org_id:
            if template.is_global():
                raise AuthorizationError("Apenas superadmins podem alterar templates globais")
            raise NotFoundError("Template não encontrado")
        return template

    def create_template(self, db: Session, caller: User, data: TemplateCreate) -> PermissionTemplate:
        org_id = self.ensure_can_manage(db, caller)
        if not data.name or data.permissions is None:
            raise ValidationError("Nome e permissões são obrigatórios")

        next_sort = db.query(func.coalesce(func.max(PermissionTemplate.sort_order), 0)).scalar() + 1

        template = PermissionTemplate(
            organization_id=org_id,
            name=data.name,
            description=data.description or None,
            icon=data.icon or DEFAULT_TEMPLATE_ICON,
            permissions=_clean_permissions(data.permissions),
            sort_order=next_sort,
            created_by=caller.id,
        )
        db.add(template)
        db.commit()
        db.refresh(template)

        logger.info("Template %s (%s) created by %s", template.id, template.name, caller.id)
        return template

    def update_template(self, db: Session, caller: User, template_id: UUID, data: TemplateUpdate) -> PermissionTemplate:
        template = self._get_editable(db, caller, template_id)

        if data.name is not None:
            template.name = data.name
        if data.description is not None:
            template.description = data.description or None
        if data.icon is not None:
            template.icon = data.icon
        if data.permissions is not None:
            template.permissions = _clean_permissions(data.permissions)

        db.commit()
        db.refresh(template)

        logger.info("Template %s updated by %s", template.id, caller.id)
        return template

    def delete_template(self, db: Session, caller: User, template_id: UUID) -> None:
        """Delete a template. Overrides copied from it are left as they are."""
        template = self._get_editable(db, caller, template_id)
        db.delete(template)
        db.commit()
        logger.info("Template %s deleted by %s", template_id, caller.id)


template_service = TemplateService()
