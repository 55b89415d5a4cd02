"""
Account API endpoints.

- POST /users     sign up
- POST /sessions  log in
- GET  /secret    protected, needs the access token
- POST /logout    client-side only
"""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from auth.middleware import require_account
from auth.models import Account
from auth.service import AccountService, who_am_i

router = APIRouter(tags=["users"])


# =============================================================================
# Request/Response Schemas
# =============================================================================

class CredentialsRequest(BaseModel):
    name: str
    password: str


class AuthResponse(BaseModel):
    id: str
    accessToken: str
    name: str
    message: str


class SecretResponse(BaseModel):
    secretMessage: str


def get_account_service(request: Request) -> AccountService:
    return request.app.state.account_service


# =============================================================================
# Routes
# =============================================================================

@router.post("/users", response_model=AuthResponse)
def register(
    request: CredentialsRequest,
    service: AccountService = Depends(get_account_service),
):
    """Sign up with name and password."""
    result = service.register(request.name, request.password)
    return AuthResponse(**result.to_dict(), message="You're signed up!")


@router.post("/sessions", response_model=AuthResponse)
def login(
    request: CredentialsRequest,
    service: AccountService = Depends(get_account_service),
):
    """Log in with name and password."""
    result = service.login(request.name, request.password)
    return AuthResponse(**result.to_dict(), message="You're logged in!")


@router.get("/secret", response_model=SecretResponse)
def secret(account: Account = Depends(require_account)):
    """Message for the logged-in account."""
    return SecretResponse(secretMessage=who_am_i(account))


@router.post("/logout")
def logout():
    """Logout (the client discards its token; nothing changes server-side)."""
    return {"message": "Logged out successfully"}
