"""
Authentication Routes

POST /auth/register - Register a seeker (sets session cookie)
POST /auth/register-recruiter - Register a recruiter (sets session cookie)
POST /auth/login - Login (sets session cookie)
POST /auth/logout - Clear session cookie
GET /auth/me - Get current user info
POST /auth/forgot-password - Send a password reset link
PUT /auth/reset-password/{token} - Set a new password with a reset token
"""

from fastapi import APIRouter, Depends, Response
from pymongo.database import Database

from careercraft.db.mongodb import get_mongo_db
from careercraft.core.auth import (
    CurrentUser,
    clear_session_cookie,
    create_access_token,
    get_current_user,
    set_session_cookie,
)
from careercraft.core.exceptions import NotFound
from careercraft.services.mongo_service import serialize_doc
from careercraft.services.user_service import UserService
from careercraft.schemas.schemas import (
    AuthResponse, ForgotPasswordRequest, LoginRequest, MessageResponse,
    RegisterRecruiterRequest, RegisterSeekerRequest, ResetPasswordRequest,
    UserResponse, UserRole,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _start_session(response: Response, user: dict, message: str) -> dict:
    token = create_access_token(str(user["_id"]), user["role"])
    set_session_cookie(response, token)
    return {**serialize_doc(user), "message": message}


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(request: RegisterSeekerRequest, response: Response, db: Database = Depends(get_mongo_db)):
    """Register a job seeker account and log them in."""
    user = UserService(db).register(UserRole.seeker, request.full_name, request.email, request.password)
    return _start_session(response, user, "User registered successfully")


@router.post("/register-recruiter", response_model=AuthResponse, status_code=201)
def register_recruiter(request: RegisterRecruiterRequest, response: Response, db: Database = Depends(get_mongo_db)):
    """Register a company recruiter account and log them in."""
    user = UserService(db).register(
        UserRole.company_recruiter, request.full_name, request.email, request.password, request.company_name
    )
    return _start_session(response, user, "Recruiter registered successfully")


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest, response: Response, db: Database = Depends(get_mongo_db)):
    """
    Login with email and password.

    The session token is returned in an httpOnly cookie, not in the body.
    """
    user = UserService(db).authenticate(request.email, request.password)
    return _start_session(response, user, "Logged in successfully")


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    clear_session_cookie(response)
    return MessageResponse(message="User logged out successfully")


@router.get("/me", response_model=UserResponse)
def get_me(user: CurrentUser = Depends(get_current_user), db: Database = Depends(get_mongo_db)):
    """Get current logged-in user's info."""
    doc = UserService(db).get_by_id(user.id)
    if not doc:
        raise NotFound("User not found.")
    return serialize_doc(doc)


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(request: ForgotPasswordRequest, db: Database = Depends(get_mongo_db)):
    """Always answers with the same message, whether or not the email is registered."""
    message = UserService(db).request_password_reset(request.email)
    return MessageResponse(message=message)


@router.put("/reset-password/{token}", response_model=MessageResponse)
def reset_password(token: str, request: ResetPasswordRequest, db: Database = Depends(get_mongo_db)):
    UserService(db).reset_password(token, request.password)
    return MessageResponse(message="Password has been reset successfully. Please log in with your new password.")
