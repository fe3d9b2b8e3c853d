"""
Seed the default global permission templates (Vendedor, Supervisor, Gerente).
Existing templates with the same name are left alone.
"""
import logging
import sys

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from teamaccess.config.permissions import DEFAULT_TEMPLATES, PERMISSION_KEYS
from teamaccess.database import SessionLocal
from teamaccess.models import PermissionTemplate

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_templates(db: Session) -> int:
    """Insert missing default templates; returns how many were created."""
    created_count = 0
    next_sort = db.query(func.coalesce(func.max(PermissionTemplate.sort_order), 0)).scalar() + 1

    for tpl in DEFAULT_TEMPLATES:
        existing = db.query(PermissionTemplate).filter(
            PermissionTemplate.organization_id.is_(None),
            PermissionTemplate.name == tpl["name"],
        ).first()
        if existing:
            logger.debug("Template already exists: %s", tpl["name"])
            continue

        db.add(PermissionTemplate(
            organization_id=None,
            name=tpl["name"],
            description=tpl["description"],
            icon=tpl["icon"],
            permissions={key: key in tpl["permissions"] for key in PERMISSION_KEYS},
            sort_order=next_sort,
            is_default=True,
        ))
        next_sort += 1
        created_count += 1

    db.commit()
    logger.info("Templates seeded: %d created", created_count)
    return created_count


if __name__ == "__main__":
    session = SessionLocal()
    try:
        seed_templates(session)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Error seeding templates: %s", e)
        sys.exit(1)
    finally:
        session.close()
