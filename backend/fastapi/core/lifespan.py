import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError
from backend.fastapi.core.init_settings import global_settings
from backend.fastapi.crud.user import bootstrap_super_admin
from backend.fastapi.dependencies.database import init_db, SessionLocal

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize the database connection
    init_db()

    # Create the first branch and super admin if configured and none exists
    if global_settings.INITIAL_ADMIN_EMAIL and global_settings.INITIAL_ADMIN_PASSWORD:
        db = SessionLocal()
        try:
            admin = bootstrap_super_admin(
                db,
                email=global_settings.INITIAL_ADMIN_EMAIL,
                password=global_settings.INITIAL_ADMIN_PASSWORD,
                branch_name=global_settings.INITIAL_BRANCH_NAME,
                branch_code=global_settings.INITIAL_BRANCH_CODE
            )
            if admin:
                logger.warning("Created initial super admin %s, change the password after first login", admin.email)
            else:
                logger.info("Users already exist, skipping initial super admin")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Error creating initial super admin: %s", e)
        finally:
            db.close()

    yield
