"""
Organization and membership models
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid, Index
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
import enum

from teamaccess.database import Base


class MemberRole(str, enum.Enum):
    """Organization member roles"""
    OWNER = "owner"
    ADMIN = "admin"
    MANAGER = "manager"
    AGENT = "agent"


class Organization(Base):
    __tablename__ = "organizations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    members = relationship("OrganizationMember", back_populates="organization", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Organization {self.name}>"


class OrganizationMember(Base):
    __tablename__ = "organization_members"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id = Column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # Plain string so that legacy/unknown roles still load (they resolve as agent)
    role = Column(String, nullable=False, default=MemberRole.AGENT.value)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    organization = relationship("Organization", back_populates="members")
    user = relationship("User", back_populates="memberships")

    __table_args__ = (
        Index("ix_organization_members_user", "user_id"),
    )

    def __repr__(self):
        return f"<OrganizationMember {self.user_id} ({self.role})>"
