from fastapi import APIRouter, Depends, status

from .. import schemas
from ..models.db.user import User
from ..services.auth_service import AuthService
from .dependencies import get_auth_service, get_bearer_token, get_current_user

router = APIRouter()


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def register(request: schemas.RegisterRequest, auth_service: AuthService = Depends(get_auth_service)):
    user, token = auth_service.register(request.email, request.password)
    return {"message": "User registered successfully", "user": user, "token": token}


@router.post("/login", response_model=schemas.AuthResponse)
def login(request: schemas.LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    user, token = auth_service.login(request.email, request.password)
    return {"message": "Login successful", "user": user, "token": token}


@router.post("/logout", response_model=schemas.MessageResponse)
def logout(
    token: str = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    End the session belonging to the bearer token.
    """
    auth_service.logout(token)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/profile", response_model=schemas.ProfileResponse)
def read_profile(current_user: User = Depends(get_current_user)):
    return {"user": current_user}
