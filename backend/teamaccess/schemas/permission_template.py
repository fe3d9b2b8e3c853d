"""
Permission Template Schemas
"""
from pydantic import BaseModel, ConfigDict
from typing import Optional, Dict
from datetime import datetime
from uuid import UUID


class TemplateCreate(BaseModel):
    """Template creation schema (name and permissions are checked by the route)"""
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    permissions: Optional[Dict[str, bool]] = None


class TemplateUpdate(BaseModel):
    """Template update schema; omitted fields keep their stored value"""
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    permissions: Optional[Dict[str, bool]] = None


class TemplateResponse(BaseModel):
    """Template response schema"""
    id: UUID
    organization_id: Optional[UUID] = None
    name: str
    description: Optional[str] = None
    icon: str
    permissions: Dict[str, bool]
    sort_order: int
    is_default: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
