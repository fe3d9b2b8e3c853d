"""Permission Template model: named, reusable permission vectors."""
import uuid as uuid_lib
from datetime import datetime
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey, JSON, Uuid, Index
from sqlalchemy.dialects.postgresql import JSONB

from teamaccess.config.permissions import DEFAULT_TEMPLATE_ICON
from teamaccess.database import Base


class PermissionTemplate(Base):
    __tablename__ = "permission_templates"

    id = Column(Uuid, primary_key=True, default=uuid_lib.uuid4)
    # NULL = global template (created by a superadmin)
    organization_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String, nullable=False, default=DEFAULT_TEMPLATE_ICON)
    permissions = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=dict)
    sort_order = Column(Integer, nullable=False, default=0)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    created_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    __table_args__ = (
        Index("ix_permission_templates_sort", "sort_order", "created_at"),
    )

    def is_global(self) -> bool:
        return self.organization_id is None

    def __repr__(self):
        return f"<PermissionTemplate {self.name}>"
