from datetime import datetime, timedelta, timezone
from typing import Optional, Dict
from jose import JWTError, jwt

from core.config import settings

ALGORITHM = "HS256"
ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"

def create_jwt_token(data: Dict, expires_delta: Optional[timedelta] = None, token_type: str = ACCESS_TOKEN) -> str:
    """
    Create a JWT token with the provided data.
    
    Args:
        data: Dictionary containing the claims to encode
        expires_delta: Optional expiration time delta
        token_type: "access" or "refresh", stored in the "type" claim
        
    Returns:
        Encoded JWT token as string
    """
    to_encode = data.copy()
    
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=15)
    
    to_encode.update({"exp": expire, "type": token_type})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)
    
    return encoded_jwt

def decode_jwt_token(token: str, token_type: Optional[str] = ACCESS_TOKEN) -> Optional[Dict]:
    """
    Decode and verify a JWT token.
    
    Args:
        token: JWT token string to decode
        token_type: Required "type" claim, or None to accept any
        
    Returns:
        Dictionary containing the decoded claims, or None if invalid, expired
        or of the wrong type
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if token_type is not None and payload.get("type") != token_type:
        return None
    return payload
