from pydantic import BaseModel

from app.schemas.User import UserRole


class SessionContext(BaseModel):
    """The signed-in user, decoded from the bearer token for each request."""
    userId: str
    email: str
    fullName: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
