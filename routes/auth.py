import logging
from typing import Dict, Any
from fastapi import APIRouter, Depends
from database.repository import Repository, get_repository
from models.auth import LoginRequest
from services.auth_service import authenticate_user, create_jwt_token, verify_jwt_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(request: LoginRequest, repository: Repository = Depends(get_repository)):
    """HR user login endpoint"""
    user = authenticate_user(repository, request.email, request.password)

    if not user:
        return {
            "success": False,
            "error": "Invalid email or password"
        }

    logger.info(f"User {user['user_id']} logged in")
    return {
        "success": True,
        "token": create_jwt_token(user),
        "user": user
    }


@router.get("/me")
async def get_current_user(current_user: Dict[str, Any] = Depends(verify_jwt_token)):
    """Get current authenticated user info"""
    return {
        "success": True,
        "user": current_user
    }


@router.post("/logout")
async def logout():
    """Logout endpoint (client-side token removal)"""
    return {
        "success": True,
        "message": "Logged out successfully"
    }
