from fastapi import APIRouter, Depends, HTTPException
from app.dependencies import get_auth_service
from app.helpers.Utilities import Utils
from app.middleware.JWTVerification import jwt_validator
from app.schemas.ServerResponse import ServerResponse
from app.schemas.Session import SessionContext
from app.schemas.User import SignInSchema, SignUpSchema
from app.services.Auth import AuthService

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


@router.post("/sign-up", response_model=ServerResponse)
def sign_up(body: SignUpSchema, service: AuthService = Depends(get_auth_service)):
    try:
        data = service.sign_up(body)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=400, detail={"data": None, "error": str(e), "success": False})


@router.post("/sign-in", response_model=ServerResponse)
def sign_in(body: SignInSchema, service: AuthService = Depends(get_auth_service)):
    try:
        data = service.sign_in(body)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=400, detail={"data": None, "error": str(e), "success": False})


@router.get("/me", response_model=ServerResponse)
def get_me(
    service: AuthService = Depends(get_auth_service),
    session: SessionContext = Depends(jwt_validator)
):
    try:
        data = service.get_current_user(session)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=400, detail={"data": None, "error": str(e), "success": False})
