"""
Permission Template API
"""
import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from teamaccess.database import get_db
from teamaccess.dependencies import get_current_user
from teamaccess.models.user import User
from teamaccess.schemas.permission import SuccessResponse
from teamaccess.schemas.permission_template import TemplateCreate, TemplateUpdate, TemplateResponse
from teamaccess.services.template_service import template_service
from teamaccess.utils.exceptions import UnexpectedError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[TemplateResponse])
@router.get("/", response_model=List[TemplateResponse], include_in_schema=False)
async def list_permission_templates(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List templates visible to the caller."""
    try:
        return template_service.list_templates(db, current_user)
    except SQLAlchemyError:
        logger.exception("List permission templates failed")
        raise UnexpectedError("Erro ao buscar templates")


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_permission_template(
    data: TemplateCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a template (superadmin or organization owner)."""
    try:
        return template_service.create_template(db, current_user, data)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Create permission template failed")
        raise UnexpectedError("Erro ao criar template")


@router.put("/{template_id}", response_model=TemplateResponse)
async def update_permission_template(
    template_id: UUID,
    data: TemplateUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update a template; omitted fields are kept."""
    try:
        return template_service.update_template(db, current_user, template_id, data)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Update permission template %s failed", template_id)
        raise UnexpectedError("Erro ao atualizar template")


@router.delete("/{template_id}", response_model=SuccessResponse)
async def delete_permission_template(
    template_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a template. User overrides copied from it are not affected."""
    try:
        template_service.delete_template(db, current_user, template_id)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Delete permission template %s failed", template_id)
        raise UnexpectedError("Erro ao excluir template")
    return SuccessResponse()
