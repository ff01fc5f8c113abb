import os
from datetime import datetime, timedelta

import jwt
from dotenv import load_dotenv

load_dotenv()

JWT_ALGORITHM = "HS256"


class Utils:

    @staticmethod
    def create_response(data, success: bool, error: str = "") -> dict:
        return {
            "data": data,
            "success": success,
            "error": error or "",
        }

    @staticmethod
    def create_jwt_token(payload: dict) -> str:
        expiry_hours = int(os.getenv("JWT_EXPIRY_HOURS", "12"))
        claims = dict(payload)
        claims["exp"] = datetime.utcnow() + timedelta(hours=expiry_hours)
        return jwt.encode(claims, Utils._jwt_secret(), algorithm=JWT_ALGORITHM)

    @staticmethod
    def decode_jwt_token(token: str) -> dict:
        """
        Decode and verify a bearer token.
        Raises jwt.PyJWTError when the token is expired, tampered with or malformed.
        """
        return jwt.decode(token, Utils._jwt_secret(), algorithms=[JWT_ALGORITHM])

    @staticmethod
    def _jwt_secret() -> str:
        secret = os.getenv("JWT_SECRET")
        if not secret:
            raise ValueError("JWT_SECRET environment variable is not set")
        return secret

    @staticmethod
    def paginate(total: int, page: int, limit: int) -> dict:
        total_pages = (total + limit - 1) // limit
        return {
            "totalPages": total_pages,
            "currentPage": page,
            "limit": limit,
        }
