from passlib.context import CryptContext
from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
from dotenv import load_dotenv
import os

from reelreview.schemas.user import User

# Load environment variables
load_dotenv()

# Security settings
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
SECRET_KEY = os.getenv("SECRET_KEY", "fallback-secret-key")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
ACCESS_TOKEN_TYPE = "access"

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _bcrypt_input(password: str) -> str:
    raw = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    # A cut through a multi-byte character drops the partial character
    return raw.decode("utf-8", errors="ignore")


# Password hashing and verification
def hash_password(password: str) -> str:
    return pwd_context.hash(_bcrypt_input(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_bcrypt_input(plain_password), hashed_password)


# JWT access tokens
def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Signed bearer token naming the user by id (and username, for clients)"""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {
        "sub": user.username,
        "user_id": user.id,
        "type": ACCESS_TOKEN_TYPE,
        "exp": expire,
    }
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """
    Validate signature, expiry and token type.

    Returns:
        The user id carried by the token, or None for any invalid token
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        return None
    return payload.get("user_id")
