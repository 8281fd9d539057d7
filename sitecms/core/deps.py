from typing import Optional
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session
from sitecms.core.database import get_db
from sitecms.core.security import decode_token
from sitecms.models.user import AdminUser

def get_current_admin(db: Session = Depends(get_db), authorization: Optional[str] = Header(None)) -> AdminUser:
    """
    Récupère l'admin connecté depuis le JWT token.

    Partagée par tous les routers du dashboard : extrait le token du header
    Authorization, le valide, et retourne le compte admin.
    """
    if not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    token = authorization.replace("Bearer ", "")
    user_id = decode_token(token)
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user = db.query(AdminUser).filter(AdminUser.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account disabled")

    return user

def get_optional_admin(db: Session = Depends(get_db), authorization: Optional[str] = Header(None)) -> Optional[AdminUser]:
    """Comme get_current_admin, mais None si aucun token n'est envoyé"""
    if not authorization:
        return None
    return get_current_admin(db, authorization)
