from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWTError

from backend.auth import jwt_handler

security = HTTPBearer()


def get_current_customer_email(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """Resolve the customer behind a bearer token; the ``sub`` claim is their email."""
    try:
        payload = jwt_handler.decode_access_token(credentials.credentials)
    except PyJWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    email = (payload.get("sub") or "").strip().lower()
    if not email:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject")
    return email
