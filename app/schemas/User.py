from pydantic import BaseModel, Field, EmailStr
from typing import Optional
from datetime import datetime
from enum import Enum
from app.schemas.PyObjectId import PyObjectId


class UserRole(str, Enum):
    ADMIN = "admin"
    STUDENT = "student"


class SignUpSchema(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    fullName: str = Field(min_length=1)


#Sign in Schema 
class SignInSchema(BaseModel):
    email: EmailStr
    password: str


class UserSchema(BaseModel):
    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    email: EmailStr
    password: str
    fullName: str
    role: UserRole = UserRole.STUDENT
    createdOn: Optional[datetime] = None
    updatedOn: Optional[datetime] = None

    class Config:
        populate_by_name = True

    def public(self) -> dict:
        """User fields that are safe to hand back to a client."""
        return {
            "id": self.id,
            "email": self.email,
            "fullName": self.fullName,
            "role": self.role.value,
        }
