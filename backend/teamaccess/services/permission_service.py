"""
Permission Service
Resolves effective permission vectors and writes per-user overrides.

A user's effective vector is either their override row for
(user, organization) or, when no row exists, the hardcoded defaults of their
membership role. Applying a template copies its values into the override row;
nothing links the two afterwards.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, Optional
from uuid import UUID

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from teamaccess.config.permissions import (
    PERMISSION_KEYS, PERMISSION_MANAGER_ROLES, full_vector, merge_onto_zero, role_defaults,
)
from teamaccess.models.organization import OrganizationMember
from teamaccess.models.permission_template import PermissionTemplate
from teamaccess.models.user import User
from teamaccess.models.user_permission import UserPermission
from teamaccess.utils.exceptions import AuthorizationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# INSERT ... ON CONFLICT DO UPDATE constructs, by dialect name
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def has_permission(vector: Dict[str, bool], key: str) -> bool:
    """Return True if ``key`` is granted in ``vector``. Unknown keys are denied."""
    return vector.get(key) is True


def match_active_template(current: Dict[str, bool], templates: Iterable[Any]) -> Optional[Any]:
    """Return the first template whose vector equals ``current`` on every catalog key.

    Both sides are merged onto the all-False vector first, so a missing key and
    an explicit False compare equal. Two templates with identical vectors are
    indistinguishable; the earlier one wins.
    """
    target = merge_onto_zero(current)
    for template in templates:
        if merge_onto_zero(template.permissions) == target:
            return template
    return None


class PermissionService:

    def get_membership(self, db: Session, user_id: UUID) -> Optional[OrganizationMember]:
        """First membership row of a user (multi-org membership is not modeled)."""
        return db.query(OrganizationMember).filter(
            OrganizationMember.user_id == user_id,
        ).order_by(OrganizationMember.created_at.asc()).first()

    def get_override(self, db: Session, user_id: UUID, organization_id: UUID) -> Optional[UserPermission]:
        return db.query(UserPermission).filter(
            UserPermission.user_id == user_id,
            UserPermission.organization_id == organization_id,
        ).first()

    def resolve_effective_permissions(self, db: Session, user_id: UUID) -> Dict[str, Any]:
        """Return ``{permissions, is_custom, role}`` for a user.

        Raises NotFoundError when the user has no organization membership.
        """
        membership = self.get_membership(db, user_id)
        if membership is None:
            raise NotFoundError("Usuário não encontrado na organização")

        override = self.get_override(db, user_id, membership.organization_id)
        if override is not None:
            return {"permissions": override.to_vector(), "is_custom": True, "role": membership.role}

        return {"permissions": role_defaults(membership.role), "is_custom": False, "role": membership.role}

    def resolve_for_user(self, db: Session, user: User) -> Dict[str, Any]:
        """Effective permissions of an authenticated user; superadmins get everything."""
        if user.is_superadmin:
            membership = self.get_membership(db, user.id)
            role = membership.role if membership else "superadmin"
            return {"permissions": full_vector(), "is_custom": False, "role": role}
        return self.resolve_effective_permissions(db, user.id)

    def authorize_target(self, db: Session, caller: User, user_id: UUID) -> OrganizationMember:
        """Check that ``caller`` may change permissions of ``user_id``.

        Superadmins may change anyone. Otherwise the caller must be owner/admin
        of the organization the target belongs to. Returns the target membership.
        """
        caller_membership = None
        if not caller.is_superadmin:
            caller_membership = self.get_membership(db, caller.id)
            if caller_membership is None or caller_membership.role not in PERMISSION_MANAGER_ROLES:
                logger.warning("User %s denied permission management (role=%s)",
                               caller.id, caller_membership.role if caller_membership else None)
                raise AuthorizationError("Apenas admin/owner podem alterar permissões")

        target = self.get_membership(db, user_id)
        if target is None:
            raise NotFoundError("Usuário não encontrado na organização")

        if caller_membership is not None and caller_membership.organization_id != target.organization_id:
            logger.warning("User %s denied permission management outside organization %s",
                           caller.id, caller_membership.organization_id)
            raise AuthorizationError("Apenas admin/owner podem alterar permissões")

        return target

    def _write_override(self, db: Session, target: OrganizationMember, values: Dict[str, bool], updated_by: UUID) -> None:
        """Upsert the override row with ``values`` in a single statement.

        Columns not in ``values`` keep their stored value, or their default
        (False) when the row is inserted.
        """
        dialect = db.get_bind().dialect.name
        if dialect not in _UPSERT_INSERTS:
            raise NotImplementedError(f"Permission overrides are not supported on {dialect}")

        changes = dict(values, updated_at=datetime.utcnow(), updated_by=updated_by)
        stmt = _UPSERT_INSERTS[dialect](UserPermission.__table__).values(
            user_id=target.user_id,
            organization_id=target.organization_id,
            **changes,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "organization_id"],
            set_=changes,
        )
        try:
            db.execute(stmt)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

    def apply_override(self, db: Session, caller: User, user_id: UUID, permissions: Optional[Dict[str, Optional[bool]]]) -> None:
        """Partial patch of a user's override row.

        Keys present are written. Keys absent keep their stored value, or take the
        column default (False) when this call creates the row.
        """
        values = {
            key: bool(value)
            for key, value in (permissions or {}).items()
            if key in PERMISSION_KEYS and value is not None
        }
        if not values:
            raise ValidationError("Permissões são obrigatórias")

        target = self.authorize_target(db, caller, user_id)
        self._write_override(db, target, values, caller.id)
        logger.info("Permissions of user %s in organization %s updated by %s (%d keys)",
                    user_id, target.organization_id, caller.id, len(values))

    def reset_override(self, db: Session, caller: User, user_id: UUID) -> None:
        """Delete the override row, reverting the user to role defaults. Idempotent."""
        target = self.authorize_target(db, caller, user_id)
        deleted = db.query(UserPermission).filter(
            UserPermission.user_id == user_id,
            UserPermission.organization_id == target.organization_id,
        ).delete(synchronize_session=False)
        db.commit()
        logger.info("Permissions of user %s reset to role defaults by %s (rows=%d)",
                    user_id, caller.id, deleted)

    def expand_template(self, db: Session, template_id: UUID, organization_id: Optional[UUID] = None) -> Dict[str, bool]:
        """Return a template's vector merged onto all-False.

        When ``organization_id`` is given, templates of other organizations are
        treated as missing.
        """
        template = db.query(PermissionTemplate).filter(PermissionTemplate.id == template_id).first()
        if template is None or (
            organization_id is not None
            and template.organization_id is not None
            and template.organization_id != organization_id
        ):
            raise NotFoundError("Template não encontrado")
        return merge_onto_zero(template.permissions)

    def apply_template(self, db: Session, caller: User, user_id: UUID, template_id: UUID) -> Dict[str, Any]:
        """Copy a template onto a user's override, writing every catalog key."""
        target = self.authorize_target(db, caller, user_id)
        vector = self.expand_template(db, template_id, target.organization_id)
        self._write_override(db, target, vector, caller.id)
        logger.info("Template %s applied to user %s by %s", template_id, user_id, caller.id)
        return self.resolve_effective_permissions(db, user_id)


permission_service = PermissionService()
