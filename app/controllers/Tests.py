from fastapi import APIRouter, Depends, HTTPException, Query
from app.dependencies import get_test_service
from app.helpers.Utilities import Utils
from app.middleware.JWTVerification import admin_validator, jwt_validator
from app.schemas.ServerResponse import ServerResponse
from app.schemas.Session import SessionContext
from app.schemas.Tests import TestCreate, TestUpdate
from app.services.Tests import TestService

router = APIRouter(prefix="/api/v1/tests", tags=["Tests"])


@router.post("/create", response_model=ServerResponse)
def create_test(
    body: TestCreate,
    service: TestService = Depends(get_test_service),
    session: SessionContext = Depends(admin_validator)
):
    try:
        data = service.create_test(body, session)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=400, detail={"data": None, "error": str(e), "success": False})


@router.get("/list", response_model=ServerResponse)
def list_tests(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: TestService = Depends(get_test_service),
    session: SessionContext = Depends(admin_validator)
):
    try:
        data = service.list_tests(page, limit)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=400, detail={"data": None, "error": str(e), "success": False})


@router.get("/active", response_model=ServerResponse)
def list_active_tests(
    service: TestService = Depends(get_test_service),
    session: SessionContext = Depends(jwt_validator)
):
    try:
        data = service.list_active_tests(session)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=400, detail={"data": None, "error": str(e), "success": False})


@router.get("/results/{test_id}", response_model=ServerResponse)
def get_test_results(
    test_id: str,
    service: TestService = Depends(get_test_service),
    session: SessionContext = Depends(admin_validator)
):
    try:
        data = service.get_test_results(test_id)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=404, detail={"data": None, "error": str(e), "success": False})


@router.get("/{test_id}", response_model=ServerResponse)
def get_test(
    test_id: str,
    service: TestService = Depends(get_test_service),
    session: SessionContext = Depends(admin_validator)
):
    try:
        data = service.get_test(test_id)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=404, detail={"data": None, "error": str(e), "success": False})


@router.put("/update/{test_id}", response_model=ServerResponse)
def update_test(
    test_id: str,
    body: TestUpdate,
    service: TestService = Depends(get_test_service),
    session: SessionContext = Depends(admin_validator)
):
    try:
        data = service.update_test(test_id, body)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=400, detail={"data": None, "error": str(e), "success": False})


@router.patch("/toggle-active/{test_id}", response_model=ServerResponse)
def toggle_active(
    test_id: str,
    service: TestService = Depends(get_test_service),
    session: SessionContext = Depends(admin_validator)
):
    try:
        data = service.toggle_active(test_id)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=400, detail={"data": None, "error": str(e), "success": False})


@router.delete("/delete/{test_id}", response_model=ServerResponse)
def delete_test(
    test_id: str,
    service: TestService = Depends(get_test_service),
    session: SessionContext = Depends(admin_validator)
):
    try:
        data = service.delete_test(test_id)
        return Utils.create_response(data["data"], data["success"], data.get("error", ""))
    except Exception as e:
        raise HTTPException(status_code=404, detail={"data": None, "error": str(e), "success": False})
