"""
Models package - Import all models to ensure SQLAlchemy relationships work
"""
# Import Base first
from teamaccess.database import Base

# Import models in dependency order to avoid relationship resolution issues
from teamaccess.models.organization import Organization, OrganizationMember, MemberRole
from teamaccess.models.user import User
from teamaccess.models.permission_template import PermissionTemplate
from teamaccess.models.user_permission import UserPermission

__all__ = [
    "Base",
    "Organization",
    "OrganizationMember",
    "MemberRole",
    "User",
    "PermissionTemplate",
    "UserPermission",
]
