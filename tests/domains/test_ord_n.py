# tests/domains/test_ord_n.py

"""
'ord' 도메인 (스토어, 주문) 관련 API 엔드포인트에 대한 통합 테스트 모듈입니다.
"""

import pytest
from httpx import AsyncClient

from app.domains.ic import models as ic_models
from app.domains.ord import models as ord_models


@pytest.mark.asyncio
async def test_create_store_admin_only(admin_client: AsyncClient, office_client: AsyncClient):
    """(성공/실패) 스토어 등록은 관리자 전용이며 이름은 중복될 수 없다"""
    response = await office_client.post("/api/v1/ord/stores", json={"name": "Magazin Nou"})
    assert response.status_code == 403

    response = await admin_client.post("/api/v1/ord/stores", json={"name": "Magazin Nou", "domain": "nou.example.com"})
    assert response.status_code == 201
    response = await admin_client.post("/api/v1/ord/stores", json={"name": "Magazin Nou"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_order_with_lines(
    office_client: AsyncClient, test_store: ord_models.Store, secondary_company: ic_models.Company
):
    """(성공) 주문 생성 시 품목과 청구 법인이 저장된다"""
    payload = {
        "order_number": "#1042",
        "store_id": test_store.id,
        "customer_name": "Maria Ionescu",
        "payment_type": "cod",
        "total_price": "149.90",
        "billing_company_id": secondary_company.id,
        "intercompany_status": "pending",
        "line_items": [
            {"sku": "SKU-001", "title": "Tricou", "variant_title": "L", "quantity": 2, "price": "49.95"},
            {"title": "Ambalaj cadou", "quantity": 1, "price": "50.00"},
        ],
    }
    response = await office_client.post("/api/v1/ord/orders", json=payload)
    assert response.status_code == 201, response.text
    order = response.json()
    assert order["store"]["name"] == "Magazin Test"
    assert len(order["line_items"]) == 2
    assert order["payment_type"] == "cod"
    assert order["intercompany_status"] == "pending"


@pytest.mark.asyncio
async def test_create_order_unknown_company(office_client: AsyncClient):
    """(실패) 존재하지 않는 청구 법인은 404"""
    response = await office_client.post("/api/v1/ord/orders", json={"order_number": "#1", "billing_company_id": 999999})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_order_forbidden_for_warehouse(warehouse_client: AsyncClient):
    """(실패) 권한: 창고 사용자는 주문을 만들 수 없다"""
    response = await warehouse_client.post("/api/v1/ord/orders", json={"order_number": "#2"})
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_record_invoice_and_filter(office_client: AsyncClient, test_store: ord_models.Store):
    """(성공) 인보이스 기록 후 목록 검색/필터"""
    response = await office_client.post("/api/v1/ord/orders", json={"order_number": "#5001", "store_id": test_store.id})
    order_id = response.json()["id"]
    await office_client.post("/api/v1/ord/orders", json={"order_number": "#5002", "store_id": test_store.id})

    response = await office_client.post(
        f"/api/v1/ord/orders/{order_id}/invoice",
        json={"invoice_number": "FCT-0001", "issued_at": "2026-03-12T10:00:00Z"},
    )
    assert response.status_code == 200
    assert response.json()["invoice_number"] == "FCT-0001"
    assert response.json()["invoice_issued_at"].startswith("2026-03-12T10:00:00")

    response = await office_client.get("/api/v1/ord/orders", params={"search": "5001"})
    body = response.json()
    assert body["total"] == 1
    assert body["items"][0]["id"] == order_id


@pytest.mark.asyncio
async def test_read_missing_order(authorized_client: AsyncClient):
    """(실패) 존재하지 않는 주문은 404"""
    response = await authorized_client.get("/api/v1/ord/orders/999999")
    assert response.status_code == 404
