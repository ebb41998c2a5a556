import jwt
import bcrypt
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from config.settings import JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRATION_HOURS
from database.repository import Repository

logger = logging.getLogger(__name__)

security = HTTPBearer()


def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, hashed: str) -> bool:
    """Verify password against hash"""
    return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))


def authenticate_user(repository: Repository, email: str, password: str) -> Optional[Dict[str, Any]]:
    """Return the HR user without its password hash, or None on bad credentials"""
    user = repository.find_one('hr_users', {'email': email})
    if not user or not user.get('password_hash'):
        return None
    if not verify_password(password, user['password_hash']):
        logger.warning(f"Failed login attempt for {email}")
        return None
    return {k: v for k, v in user.items() if k != 'password_hash'}


def create_jwt_token(user_data: Dict[str, Any]) -> str:
    """Create JWT token"""
    now = datetime.now(timezone.utc)
    payload = {
        "user_id": user_data["user_id"],
        "email": user_data["email"],
        "full_name": user_data.get("full_name"),
        "role": user_data.get("role", "viewer"),
        "can_edit_employees": user_data.get("can_edit_employees", False),
        "exp": now + timedelta(hours=JWT_EXPIRATION_HOURS),
        "iat": now
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def verify_jwt_token(credentials: HTTPAuthorizationCredentials = Depends(security)) -> Dict[str, Any]:
    """Verify JWT token and return payload"""
    try:
        payload = jwt.decode(credentials.credentials, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        return payload
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials"
        )


def require_edit_permission(current_user: Dict[str, Any] = Depends(verify_jwt_token)) -> Dict[str, Any]:
    """Require can_edit_employees permission"""
    if not current_user.get("can_edit_employees", False):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to edit HR records. Contact your system administrator to request the 'HR Editor' role."
        )
    return current_user
