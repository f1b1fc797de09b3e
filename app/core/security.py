# app/core/security.py

"""
애플리케이션의 보안 관련 유틸리티 함수 및 의존성 주입을 정의하는 모듈입니다.

- 비밀번호 해싱 및 검증.
- JWT(JSON Web Token) 생성 및 검증.
- OAuth2 Password Bearer 스키마를 사용하여 현재 사용자 획득.
- 권한 코드(예: "handover.scan") 기반 권한 부여(Authorization) 검사.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app import API_PREFIX
from app.core.config import settings
from app.core.database import get_session
from app.domains.usr import models as usr_models

logger = logging.getLogger(__name__)

UserRole = usr_models.UserRole


# --- 비밀번호 해싱 설정 ---
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    일반 텍스트 비밀번호와 해싱된 비밀번호를 비교하여 일치하는지 확인합니다.
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """주어진 비밀번호를 해싱합니다."""
    return pwd_context.hash(password)


# --- OAuth2 스키마 설정 ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{API_PREFIX}/usr/auth/token")


# --- 권한 코드 -> 허용되는 가장 낮은 역할(가장 큰 role 값) ---
# 역할 값이 작을수록 높은 권한이므로 user.role <= 허용 값 이면 통과합니다.
PERMISSION_ROLES: Dict[str, UserRole] = {
    # 재고
    "inventory.view": UserRole.GENERAL_USER,
    "inventory.edit": UserRole.WAREHOUSE,
    "inventory.adjust": UserRole.MANAGER,
    # 창고 간 이동
    "transfers.view": UserRole.GENERAL_USER,
    "transfers.create": UserRole.WAREHOUSE,
    "transfers.execute": UserRole.MANAGER,
    # 입고 / NIR
    "reception.verify": UserRole.OFFICE,
    "reception.approve_differences": UserRole.MANAGER,
    # 주문
    "orders.view": UserRole.GENERAL_USER,
    "orders.edit": UserRole.OFFICE,
    # AWB
    "awb.view": UserRole.GENERAL_USER,
    "awb.track": UserRole.OFFICE,
    # 인계 (predare)
    "handover.view": UserRole.GENERAL_USER,
    "handover.scan": UserRole.WAREHOUSE,
    "handover.finalize": UserRole.MANAGER,
    "handover.report": UserRole.OFFICE,
    "settings.handover": UserRole.ADMIN,
    # 법인간 정산
    "intercompany.view": UserRole.OFFICE,
    "intercompany.generate": UserRole.MANAGER,
    "intercompany.mark_paid": UserRole.MANAGER,
    # 관리
    "admin.cron": UserRole.ADMIN,
}


def has_permission(user: usr_models.User, code: str) -> bool:
    """
    사용자가 주어진 권한 코드를 가지고 있는지 확인합니다.
    비활성 사용자는 항상 거부되며, 등록되지 않은 코드는 SUPERUSER만 허용합니다.
    """
    if not user.is_active:
        return False
    if user.role == UserRole.SUPERUSER:
        return True
    allowed = PERMISSION_ROLES.get(code)
    if allowed is None:
        return False
    return user.role <= allowed


def get_user_permissions(user: usr_models.User) -> List[str]:
    """사용자에게 허용된 모든 권한 코드를 정렬하여 반환합니다."""
    return sorted(code for code in PERMISSION_ROLES if has_permission(user, code))


# --- JWT 토큰 생성 및 검증 ---
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Access Token을 생성합니다.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)


async def get_current_user_from_token(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_session),
) -> usr_models.User:
    """
    JWT 토큰을 디코딩하고 검증하여 현재 사용자를 데이터베이스에서 가져옵니다.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY.get_secret_value(), algorithms=[settings.ALGORITHM])
        login_id: Optional[str] = payload.get("sub")
        if login_id is None:
            raise credentials_exception
    except JWTError as e:
        logger.debug("JWTError: %s", e)
        raise credentials_exception

    statement = select(usr_models.User).where(usr_models.User.login_id == login_id)
    result = await db.execute(statement)
    user = result.scalars().one_or_none()
    if user is None:
        raise credentials_exception
    return user


# --- 역할/권한 기반 권한 부여 의존성 ---

def get_current_active_user(
    current_user: usr_models.User = Depends(get_current_user_from_token),
) -> usr_models.User:
    """
    현재 인증된 활성 사용자를 반환합니다.
    계정이 비활성화된 경우 400 Bad Request를 발생시킵니다.
    """
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user


def get_current_admin_user(
    current_user: usr_models.User = Depends(get_current_active_user),
) -> usr_models.User:
    """
    현재 인증된 관리자 사용자를 반환합니다 (role <= ADMIN).
    관리자 권한이 없는 경우 403 Forbidden을 발생시킵니다.
    """
    if current_user.role > UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions. Admin role required."
        )
    return current_user


def require_permission(code: str) -> Callable[..., usr_models.User]:
    """
    권한 코드를 검사하는 FastAPI 의존성을 생성합니다.

    사용 예:
        current_user: UsrUser = Depends(deps.require_permission("handover.scan"))
    """
    def _checker(current_user: usr_models.User = Depends(get_current_active_user)) -> usr_models.User:
        if not has_permission(current_user, code):
            logger.info("Permission '%s' denied for user %s (role=%s)", code, current_user.login_id, current_user.role.name)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not enough permissions"
            )
        return current_user

    _checker.__name__ = f"require_{code.replace('.', '_')}"
    return _checker
