"""
Session Model
Request-scoped identity decoded from the session cookie
"""
from pydantic import BaseModel

from leave_portal.models.staff import StaffRole


class SessionContext(BaseModel):
    """Who is making the current request"""
    user_id: str
    name: str
    role: StaffRole

    @property
    def is_admin(self) -> bool:
        return self.role == StaffRole.ADMIN
