# app/domains/inv/__init__.py

"""
'inv' 도메인 패키지입니다 (PostgreSQL 'inv' 스키마).

공급업체와 공급업체 인보이스, 창고와 재고 품목, 재고 이동 이력,
발주(PC), 입고 검수 보고서(PV), 입고 전표(NIR)와 그 승인 워크플로우,
주문 판매 차감(SALE), 창고 간 이동(TRF)을 다룹니다.

주요 서브모듈:
- `models.py`: 'inv' 스키마 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 Pydantic 모델.
- `crud.py`: 기준정보, 발주, NIR 목록의 CRUD.
- `workflow.py`: NIR 상태 머신 (GENERAT -> ... -> IN_STOC).
- `services.py`: 입고 검수, NIR 생성, 재고 반영과 조정, 주문 재고 차감, 창고 간 이동.
- `routers.py`: API 엔드포인트.
"""

__title__ = "Back-office Inventory Domain"
__description__ = "Purchasing, goods reception (PV), NIR approval workflow, stock movements and warehouse transfers."
__version__ = "0.1.0"
__all__ = []
