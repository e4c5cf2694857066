import jwt

from backend.core import config


def decode_access_token(token: str) -> dict:
    """Tokens are issued by the identity provider; ``sub`` carries the customer email."""
    return jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
