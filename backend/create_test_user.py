"""
Create a test organization owner directly in the database and print an access token
"""
import sys
import uuid
from datetime import datetime, timedelta
from sqlalchemy.exc import SQLAlchemyError

from teamaccess.database import SessionLocal
from teamaccess.models import MemberRole, Organization, OrganizationMember, User
from teamaccess.services.auth_service import create_user_token


def create_test_user():
    db = SessionLocal()

    try:
        # Check if organization exists
        org = db.query(Organization).filter(Organization.name == "Test Organization").first()

        if not org:
            org = Organization(
                id=uuid.uuid4(),
                name="Test Organization",
                created_at=datetime.utcnow(),
                updated_at=datetime.utcnow()
            )
            db.add(org)
            db.flush()
            print(f"✅ Created organization: {org.name} (ID: {org.id})")
        else:
            print(f"ℹ️  Organization already exists: {org.name} (ID: {org.id})")

        user = db.query(User).filter(User.email == "owner@test.com").first()

        if not user:
            user = User(
                id=uuid.uuid4(),
                email="owner@test.com",
                full_name="Test Owner",
                is_active=True,
                created_at=datetime.utcnow(),
            )
            db.add(user)
            db.flush()
            db.add(OrganizationMember(organization_id=org.id, user_id=user.id, role=MemberRole.OWNER.value))
            db.commit()
            print("✅ Test owner created successfully!")
        else:
            print("ℹ️  User already exists: owner@test.com")

        print(f"   Email: {user.email}")
        print(f"   Organization: {org.name}")
        print(f"   Token (24h): {create_user_token(user, timedelta(hours=24))}")

    except SQLAlchemyError as e:
        db.rollback()
        print(f"❌ Error creating test user: {str(e)}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    create_test_user()
