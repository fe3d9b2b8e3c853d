"""User Permission model: per-(user, organization) override of the role defaults.

One boolean column per catalog key. The existence of a row means the user has
custom permissions; no row means role defaults apply.
"""
import uuid as uuid_lib
from datetime import datetime
from typing import Dict
from sqlalchemy import Column, Boolean, DateTime, ForeignKey, UniqueConstraint, Uuid, false

from teamaccess.config.permissions import PERMISSION_KEYS
from teamaccess.database import Base


class UserPermission(Base):
    __tablename__ = "user_permissions"

    id = Column(Uuid, primary_key=True, default=uuid_lib.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    organization_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    updated_by = Column(Uuid, ForeignKey("users.id"), nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "organization_id", name="uq_user_permissions_user_org"),
    )

    def to_vector(self) -> Dict[str, bool]:
        """Read the row as a full permission vector (NULL reads as False)."""
        return {key: bool(getattr(self, key)) for key in PERMISSION_KEYS}

    def __repr__(self):
        return f"<UserPermission {self.user_id} @ {self.organization_id}>"


for _key in PERMISSION_KEYS:
    setattr(UserPermission, _key, Column(_key, Boolean, nullable=False, default=False, server_default=false()))
del _key
