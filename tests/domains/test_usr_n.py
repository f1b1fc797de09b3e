# tests/domains/test_usr_n.py

"""
'usr' 도메인 (인증, 사용자 관리) 관련 API 엔드포인트에 대한 통합 테스트 모듈입니다.
"""

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from fastapi import status

from app.domains.usr import models as usr_models
from app.domains.usr import crud as usr_crud


# =============================================================================
# 1. 인증 (Authentication)
# =============================================================================
@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_user: usr_models.User):
    """(성공) 올바른 로그인 ID/비밀번호로 토큰 발급"""
    response = await client.post("/api/v1/usr/auth/token", data={"username": "testuser", "password": "testpass123"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["token_type"] == "bearer"
    assert response.json()["access_token"]


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user: usr_models.User):
    """(실패) 잘못된 비밀번호는 401"""
    response = await client.post("/api/v1/usr/auth/token", data={"username": "testuser", "password": "wrong-pass"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_login_inactive_user(client: AsyncClient, user_factory):
    """(실패) 비활성 사용자는 로그인할 수 없다"""
    await user_factory("inactiv", "inactivpass123", role=usr_models.UserRole.OFFICE, is_active=False)
    response = await client.post("/api/v1/usr/auth/token", data={"username": "inactiv", "password": "inactivpass123"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Inactive user"


@pytest.mark.asyncio
async def test_read_me_requires_token(client: AsyncClient):
    """(실패) 토큰 없이 /auth/me 접근 시 401"""
    response = await client.get("/api/v1/usr/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_read_me(warehouse_client: AsyncClient):
    """(성공) 현재 사용자 정보"""
    response = await warehouse_client.get("/api/v1/usr/auth/me")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["login_id"] == "depozit"
    assert response.json()["role"] == usr_models.UserRole.WAREHOUSE


@pytest.mark.asyncio
async def test_my_permissions_follow_role(warehouse_client: AsyncClient, manager_client: AsyncClient):
    """(성공) 권한 코드는 역할에 따라 계산된다"""
    response = await warehouse_client.get("/api/v1/usr/auth/me/permissions")
    permissions = set(response.json()["permissions"])
    assert {"handover.scan", "inventory.edit", "awb.view"} <= permissions
    assert "handover.finalize" not in permissions
    assert "reception.verify" not in permissions

    response = await manager_client.get("/api/v1/usr/auth/me/permissions")
    permissions = set(response.json()["permissions"])
    assert {"handover.finalize", "reception.approve_differences", "intercompany.generate"} <= permissions
    assert "settings.handover" not in permissions
    assert "admin.cron" not in permissions


# =============================================================================
# 2. 사용자 (User) 관리
# =============================================================================
@pytest.mark.asyncio
async def test_admin_creates_user(admin_client: AsyncClient, db_session: AsyncSession):
    """(성공) 관리자: 새 사용자 생성, 비밀번호는 해시로 저장"""
    payload = {
        "login_id": "newoffice",
        "email": "newoffice@example.com",
        "full_name": "Noua Office",
        "role": usr_models.UserRole.OFFICE,
        "password": "parola-sigura",
    }
    response = await admin_client.post("/api/v1/usr/users", json=payload)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    assert "password" not in response.json()

    created = await usr_crud.user.get_by_login_id(db_session, login_id="newoffice")
    assert created is not None
    assert created.password_hash != "parola-sigura"

    response = await admin_client.post("/api/v1/usr/users", json=dict(payload, email="alt@example.com"))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
async def test_admin_cannot_create_superuser(admin_client: AsyncClient):
    """(실패) 자신보다 높은 역할의 사용자는 만들 수 없다"""
    payload = {"login_id": "root2", "role": usr_models.UserRole.SUPERUSER, "password": "superpass123"}
    response = await admin_client.post("/api/v1/usr/users", json=payload)
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_create_user_short_password(admin_client: AsyncClient):
    """(실패) 8자 미만 비밀번호는 422"""
    response = await admin_client.post("/api/v1/usr/users", json={"login_id": "scurt", "password": "123"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_manager_cannot_manage_users(manager_client: AsyncClient):
    """(실패) 권한: 매니저는 사용자 생성 불가"""
    response = await manager_client.post("/api/v1/usr/users", json={"login_id": "x", "password": "xxxxxxxx"})
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_non_admin_sees_only_self(office_client: AsyncClient, test_office_user: usr_models.User, test_user: usr_models.User):
    """(성공/실패) 일반 역할은 자기 정보만 조회할 수 있다"""
    response = await office_client.get("/api/v1/usr/users")
    assert [u["login_id"] for u in response.json()] == ["office"]

    response = await office_client.get(f"/api/v1/usr/users/{test_user.id}")
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_user_cannot_change_own_role(office_client: AsyncClient, test_office_user: usr_models.User):
    """(실패→성공) 본인 정보 수정은 가능하지만 역할 변경은 불가"""
    response = await office_client.put(f"/api/v1/usr/users/{test_office_user.id}", json={"role": usr_models.UserRole.ADMIN})
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = await office_client.put(f"/api/v1/usr/users/{test_office_user.id}", json={"full_name": "Oana Popa"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["full_name"] == "Oana Popa"


@pytest.mark.asyncio
async def test_admin_cannot_delete_self(admin_client: AsyncClient, test_admin_user: usr_models.User, test_user: usr_models.User):
    """(실패→성공) 관리자는 자기 계정을 삭제할 수 없고 다른 사용자는 삭제할 수 있다"""
    response = await admin_client.delete(f"/api/v1/usr/users/{test_admin_user.id}")
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = await admin_client.delete(f"/api/v1/usr/users/{test_user.id}")
    assert response.status_code == status.HTTP_204_NO_CONTENT
