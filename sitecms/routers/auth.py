import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sitecms.core.database import get_db
from sitecms.core.deps import get_optional_admin
from sitecms.core.security import create_access_token, create_refresh_token, verify_token
from sitecms.models.user import AdminUser
from sitecms.schemas.user import UserCreate, UserResponse, LoginRequest, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/signup", response_model=UserResponse)
def signup(user_data: UserCreate, db: Session = Depends(get_db),
           current_user: Optional[AdminUser] = Depends(get_optional_admin)):
    """Créer un compte (le premier librement, les suivants par un admin)"""

    # Le premier compte créé administre le site, ensuite seul un admin invite
    is_first = db.query(AdminUser).count() == 0
    if not is_first:
        if current_user is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
        if current_user.role != "admin":
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only admins can create accounts")

    # Vérifie si l'email existe déjà
    if db.query(AdminUser).filter(AdminUser.email == user_data.email).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    # Vérifie si le username existe déjà
    if db.query(AdminUser).filter(AdminUser.username == user_data.username).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken")

    new_user = AdminUser(
        email=user_data.email,
        username=user_data.username,
        role="admin" if is_first else "editor"
    )
    new_user.set_password(user_data.password)

    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info(f"Admin account created: {new_user.username} ({new_user.role})")

    return new_user

@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Se connecter et recevoir les tokens"""

    user = db.query(AdminUser).filter(AdminUser.email == credentials.email).first()
    if not user or not user.verify_password(credentials.password):
        logger.warning(f"Failed login for {credentials.email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account disabled")

    user.last_login_at = datetime.utcnow()
    db.commit()

    return {
        "access_token": create_access_token(user.id, user.username),
        "refresh_token": create_refresh_token(user.id, user.username),
        "token_type": "bearer"
    }

@router.post("/refresh", response_model=TokenResponse)
def refresh(refresh_token: str, db: Session = Depends(get_db)):
    """Utiliser un refresh_token pour obtenir un nouvel access_token"""

    payload = verify_token(refresh_token)
    if not payload or payload.get("type") != "refresh":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    user = db.query(AdminUser).filter(AdminUser.id == payload.get("user_id")).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    return {
        "access_token": create_access_token(user.id, user.username),
        "refresh_token": refresh_token,
        "token_type": "bearer"
    }
