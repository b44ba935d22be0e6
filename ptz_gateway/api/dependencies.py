"""Dependency injection for FastAPI endpoints"""

import secrets
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from ptz_gateway.config import settings
from ptz_gateway.domain.tables import PolicyTables
from ptz_gateway.infrastructure.clients.mailer import Mailer
from ptz_gateway.infrastructure.clients.sheets import SheetsClient

basic_auth = HTTPBasic(auto_error=False)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_policy(request: Request) -> PolicyTables:
    """Policy tables built once at application start"""
    return request.app.state.policy


def get_mailer() -> Mailer:
    """Provide SMTP mailer instance"""
    return Mailer()


def get_sheets_client() -> SheetsClient:
    """Provide spreadsheet mirror client instance"""
    return SheetsClient()


def require_admin(credentials: HTTPBasicCredentials | None = Depends(basic_auth)) -> str:
    """Gate admin endpoints behind the shared admin credential"""
    if credentials is not None:
        user_ok = secrets.compare_digest(credentials.username.encode(), settings.admin_username.encode())
        password_ok = secrets.compare_digest(credentials.password.encode(), settings.admin_password.encode())
        if user_ok and password_ok:
            return credentials.username

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Basic"},
    )
