"""Authentication API router."""
import hmac

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
import logging

from auth import verify_token
from config import ADMIN_USERNAME, ADMIN_PASSWORD, ADMIN_TOKEN
from monitoring import auth_attempts_counter, auth_failures_counter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["authentication"])


class LoginRequest(BaseModel):
    """Login request model."""
    username: str
    password: str


class LoginResponse(BaseModel):
    """Login response model."""
    token: str
    tokenType: str = "bearer"


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest):
    """Authenticate the store administrator and return a bearer token."""
    auth_attempts_counter.add(1, {"type": "login"})

    username_ok = hmac.compare_digest(request.username.encode(), ADMIN_USERNAME.encode())
    password_ok = hmac.compare_digest(request.password.encode(), ADMIN_PASSWORD.encode())
    if not (username_ok and password_ok):
        auth_failures_counter.add(1, {"reason": "invalid_credentials"})
        logger.warning("Login failed: Invalid credentials", extra={
            "username": request.username
        })
        raise HTTPException(status_code=401, detail="Invalid username or password")

    logger.info("Administrator logged in", extra={
        "username": request.username
    })

    return LoginResponse(token=ADMIN_TOKEN)


@router.get("/verify")
async def verify(token: str = Depends(verify_token)):
    """Check that the bearer token is still accepted."""
    return {"authenticated": True}


@router.post("/logout")
async def logout():
    """Bearer tokens are held by the client, so logging out is acknowledged only."""
    return {"message": "Logged out"}
