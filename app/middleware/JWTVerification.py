import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError

from app.helpers.Utilities import Utils
from app.schemas.Session import SessionContext

bearer_scheme = HTTPBearer(auto_error=False)


def jwt_validator(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> SessionContext:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"data": None, "error": "Missing authorization token", "success": False},
        )
    try:
        payload = Utils.decode_jwt_token(credentials.credentials)
        return SessionContext(
            userId=payload["id"],
            email=payload["email"],
            fullName=payload["fullName"],
            role=payload["role"],
        )
    except (jwt.PyJWTError, KeyError, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"data": None, "error": "Invalid or expired token", "success": False},
        )


def admin_validator(session: SessionContext = Depends(jwt_validator)) -> SessionContext:
    if not session.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"data": None, "error": "Admin access required", "success": False},
        )
    return session
