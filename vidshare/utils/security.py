from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader
import jwt
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.config import JWTSettings
from vidshare.db.database import get_db
from vidshare.models.users import Users

auth_scheme = APIKeyHeader(name="Authorization", scheme_name="Bearer", auto_error=False)

jwt_settings = JWTSettings()


async def verify_token(token:str, secret_key:str, algorithm:str):
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
        return payload
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Could not validate credentials")

async def get_current_user(token: str = Depends(auth_scheme), db: AsyncSession = Depends(get_db)) -> Users:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    if token.startswith("Bearer "):
        token = token[7:]

    payload = await verify_token(token, jwt_settings.secret_key, jwt_settings.algorithm)
    user_id = payload.get("id")
    if not user_id or payload.get("type") != "access":
        raise credentials_exception

    user = await db.get(Users, str(user_id))
    if user is None:
        logger.warning(f"Token references unknown user {user_id}")
        raise credentials_exception

    return user

async def get_optional_user(token: Optional[str] = Depends(auth_scheme), db: AsyncSession = Depends(get_db)) -> Optional[Users]:
    if not token:
        return None
    return await get_current_user(token, db)
