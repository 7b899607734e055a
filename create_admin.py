"""
Admin account bootstrap script
Usage: python create_admin.py <email> <password> [full name]
"""
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from appointly.database import Base, SessionLocal, engine
from appointly.domain.identity.service import AuthService
from appointly.shared.validators import validate_email, validate_strong_password

logging.basicConfig(level=logging.INFO, format='%(message)s')
logger = logging.getLogger(__name__)


def create_admin(email: str, password: str, full_name: str = "Administrator"):
    """Create the tables if needed and insert an admin account"""
    email = validate_email(email)
    validate_strong_password(password)

    Base.metadata.create_all(bind=engine, checkfirst=True)

    db = SessionLocal()
    try:
        user = AuthService(db).seed_admin(email, password, full_name)
    finally:
        db.close()

    if user is None:
        logger.info(f"⚠️ A user with email {email} already exists - nothing to do")
    else:
        logger.info(f"✅ Admin created: {user.id}")


if __name__ == "__main__":
    if len(sys.argv) < 3:
        logger.error("Usage: python create_admin.py <email> <password> [full name]")
        sys.exit(1)

    try:
        create_admin(sys.argv[1], sys.argv[2], " ".join(sys.argv[3:]) or "Administrator")
    except ValueError as e:
        logger.error(f"❌ Invalid input: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"❌ Admin creation failed: {e}")
        sys.exit(1)
