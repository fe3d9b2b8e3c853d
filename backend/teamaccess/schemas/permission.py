"""Schemas for the user permission API.

``PermissionVector`` and ``PermissionPatch`` are generated from the catalog, so
adding a key to ``ALL_PERMISSIONS`` adds a field everywhere they are used.
"""
from typing import Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel, create_model

from teamaccess.config.permissions import PERMISSION_KEYS

PermissionVector = create_model(
    "PermissionVector",
    **{key: (bool, False) for key in PERMISSION_KEYS},
)

PermissionPatch = create_model(
    "PermissionPatch",
    **{key: (Optional[bool], None) for key in PERMISSION_KEYS},
)


class PermissionKeyInfo(BaseModel):
    key: str
    label: str
    description: str


class PermissionGroupInfo(BaseModel):
    title: str
    items: List[PermissionKeyInfo]


class PermissionCatalogResponse(BaseModel):
    groups: List[PermissionGroupInfo]
    role_defaults: Dict[str, PermissionVector]


class EffectivePermissionsResponse(BaseModel):
    permissions: PermissionVector
    is_custom: bool
    role: str


class PermissionsUpdate(BaseModel):
    permissions: Optional[PermissionPatch] = None


class SuccessResponse(BaseModel):
    success: bool = True


class MatchingTemplateResponse(BaseModel):
    template_id: Optional[UUID] = None
