from fastapi import APIRouter, Depends, HTTPException
from app.dependencies import get_attempt_service
from app.helpers.Utilities import Utils
from app.middleware.JWTVerification import jwt_validator
from app.schemas.Attempts import OptionSelection
from app.schemas.ServerResponse import ServerResponse
from app.schemas.Session import SessionContext
from app.services.Attempts import AttemptService

router = APIRouter(prefix="/api/v1/attempts", tags=["Attempts"])


@router.post("/start/{test_id}", response_model=ServerResponse)
def start_attempt(
    test_id: str,
    service: AttemptService = Depends(get_attempt_service),
    session: SessionContext = Depends(jwt_validator)
):
    try:
        data = service.start_attempt(session, test_id)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=400, detail={"data": None, "error": str(e), "success": False})


@router.get("/history", response_model=ServerResponse)
def get_history(
    service: AttemptService = Depends(get_attempt_service),
    session: SessionContext = Depends(jwt_validator)
):
    try:
        data = service.list_history(session)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=400, detail={"data": None, "error": str(e), "success": False})


@router.get("/review/{attempt_id}", response_model=ServerResponse)
def review_attempt(
    attempt_id: str,
    service: AttemptService = Depends(get_attempt_service),
    session: SessionContext = Depends(jwt_validator)
):
    try:
        data = service.review_attempt(session, attempt_id)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=404, detail={"data": None, "error": str(e), "success": False})


@router.get("/{attempt_id}", response_model=ServerResponse)
def get_attempt(
    attempt_id: str,
    service: AttemptService = Depends(get_attempt_service),
    session: SessionContext = Depends(jwt_validator)
):
    try:
        data = service.get_attempt(session, attempt_id)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=404, detail={"data": None, "error": str(e), "success": False})


@router.post("/select/{attempt_id}", response_model=ServerResponse)
def select_option(
    attempt_id: str,
    body: OptionSelection,
    service: AttemptService = Depends(get_attempt_service),
    session: SessionContext = Depends(jwt_validator)
):
    try:
        data = service.select_option(session, attempt_id, body)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=400, detail={"data": None, "error": str(e), "success": False})


@router.post("/submit/{attempt_id}", response_model=ServerResponse)
def submit_attempt(
    attempt_id: str,
    service: AttemptService = Depends(get_attempt_service),
    session: SessionContext = Depends(jwt_validator)
):
    try:
        data = service.submit_attempt(session, attempt_id)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=400, detail={"data": None, "error": str(e), "success": False})
