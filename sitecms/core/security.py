from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from sitecms.core.config import settings

def _create_token(user_id: int, username: str, minutes: int, token_type: str) -> str:
    payload = {
        "user_id": user_id,
        "username": username,
        "exp": datetime.utcnow() + timedelta(minutes=minutes),
        "type": token_type
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")

def create_access_token(user_id: int, username: str) -> str:
    # token d'accès court pour le dashboard admin
    return _create_token(user_id, username, settings.JWT_EXPIRE_MIN, "access")

def create_refresh_token(user_id: int, username: str) -> str:
    return _create_token(user_id, username, settings.JWT_REFRESH_EXPIRE_MIN, "refresh")

def verify_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])
    except JWTError:
        return None

def decode_token(token: str) -> Optional[int]:
    """Retourne l'id admin d'un access token valide"""
    payload = verify_token(token)
    if payload is None or payload.get("type") != "access":
        return None
    return payload.get("user_id")
