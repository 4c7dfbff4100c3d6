from sqlalchemy.orm import Session
from app.models.user import User
from app.services.auth import get_password_hash
import logging
import os

logger = logging.getLogger(__name__)


def create_initial_admin(db: Session):
    """
    Crea el usuario admin definido por ADMIN_EMAIL / ADMIN_PASSWORD si la tabla
    de usuarios está vacía.
    """
    admin_email = os.getenv("ADMIN_EMAIL")
    admin_password = os.getenv("ADMIN_PASSWORD")

    if not admin_email or not admin_password:
        logger.info("ADMIN_EMAIL/ADMIN_PASSWORD no configurados, no se crea admin inicial.")
        return None

    if db.query(User).count() > 0:
        logger.info("Ya existen usuarios, no se crea admin inicial.")
        return None

    db_user = User(
        name=os.getenv("ADMIN_NAME", "admin"),
        email=admin_email,
        phone=None,
        hashed_password=get_password_hash(admin_password),
        is_admin=True,
        is_active=True,
    )
    db.add(db_user)
    db.commit()
    logger.info(f"Admin creado: {admin_email}")
    return db_user
