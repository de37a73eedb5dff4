"""
Database bootstrap
Beanie initialisation and the default admin account
"""
import logging
from beanie import init_beanie

from leave_portal.config import settings
from leave_portal.api.routes.auth import get_password_hash
from leave_portal.models.leave import LeaveRequest
from leave_portal.models.notification import Notification
from leave_portal.models.staff import Staff, StaffRole

logger = logging.getLogger(__name__)

DOCUMENT_MODELS = [Staff, LeaveRequest, Notification]


async def init_db(database):
    """Register the document models against a motor database"""
    await init_beanie(database=database, document_models=DOCUMENT_MODELS)


async def ensure_default_admin() -> Staff:
    """Create the first admin if the staff collection has none"""
    admin = await Staff.find_one(Staff.role == StaffRole.ADMIN)
    if admin:
        return admin

    admin = Staff(
        staff_id="ADMIN001",
        first_name="System",
        last_name="Admin",
        email=settings.DEFAULT_ADMIN_EMAIL,
        designation="Administrator",
        role=StaffRole.ADMIN,
        password_hash=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
    )
    await admin.insert()
    logger.info("Default admin created (%s)", settings.DEFAULT_ADMIN_EMAIL)
    return admin
