# app/domains/shp/__init__.py

"""
'shp' 도메인 패키지입니다 (PostgreSQL 'shp' 스키마).

택배 운송장(AWB)과 일일 택배 인계(predare) 세션을 다룹니다.

주요 서브모듈:
- `models.py`: AWB, HandoverSession 테이블.
- `courier_statuses.py`: 택배사 상태 코드표와 AWB 상태 매핑.
- `handover.py`: 인계 스캔, 일일 마감/재개, C0 경보, 보고서, 자동 마감.
- `crud.py`: AWB 등록/조회, 택배사 상태 반영.
- `tasks.py`: 자동 마감 ARQ 작업.
- `routers.py`: API 엔드포인트.
"""

__title__ = "Back-office Shipping Domain"
__description__ = "Courier AWBs, status tracking and daily courier handover reconciliation."
__version__ = "0.1.0"
__all__ = []
