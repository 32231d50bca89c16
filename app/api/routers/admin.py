# app/api/routers/admin.py
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.api.deps import is_admin, require_admin, set_admin_cookie
from app.data.database import get_db
from app.domain.errors import StoreError
from app.domain.schemas import AdminLoginIn, DashboardOut, MessageOut
from app.services.admin_service import DashboardService, check_credentials
from app.utils.settings import ADMIN_COOKIE_NAME

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login", response_model=MessageOut)
def login(payload: AdminLoginIn, response: Response):
    try:
        check_credentials(payload.email, payload.password)
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    set_admin_cookie(response)
    return MessageOut(message="Login successful")


@router.post("/logout", response_model=MessageOut)
def logout(response: Response):
    response.delete_cookie(ADMIN_COOKIE_NAME, path="/")
    return MessageOut(message="Logged out successfully")


@router.get("/verify")
def verify(admin: bool = Depends(is_admin)):
    if not admin:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return {"authenticated": True}


@router.get("/dashboard", response_model=DashboardOut, dependencies=[Depends(require_admin)])
def dashboard(db: Session = Depends(get_db)):
    return DashboardOut.model_validate(DashboardService(db).stats())
