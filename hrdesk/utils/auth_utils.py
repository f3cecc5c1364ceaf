from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, HTTPException, Request, status

from config import settings

JWT_ALGORITHM = "HS256"


def create_jwt_token(user: Dict[str, Any]) -> str:
    """Issue a signed token for a stored user document."""
    payload = {
        "user_id": str(user["_id"]),
        "email": user.get("email"),
        "name": f"{user.get('firstName', '')} {user.get('lastName', '')}".strip(),
        "role": user.get("role", "employee"),
        "exp": datetime.utcnow() + timedelta(minutes=settings.JWT_EXP_DELTA_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_jwt_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT token, raising HTTP errors when invalid."""
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc


def extract_bearer_token(auth_header: str) -> str:
    """Extract the bearer token from an Authorization header."""
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authentication credentials")

    token = auth_header.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authentication credentials")
    return token


def get_request_payload(request: Request) -> Dict[str, Any]:
    """Return decoded JWT payload from the incoming FastAPI request."""
    token = extract_bearer_token(request.headers.get("Authorization"))
    return decode_jwt_token(token)


def get_current_user(request: Request) -> Dict[str, Any]:
    return get_request_payload(request)


def get_optional_user(request: Request) -> Optional[Dict[str, Any]]:
    """Decoded token when one is sent, else None. A bad token is still rejected."""
    if not request.headers.get("Authorization"):
        return None
    return get_request_payload(request)


def actor_id(current_user: Optional[Dict[str, Any]]) -> Optional[str]:
    return (current_user or {}).get("user_id")


def require_admin(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if current_user.get("role") != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin privileges required.",
        )
    return current_user
