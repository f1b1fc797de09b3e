# app/domains/ic/__init__.py

"""
'ic' 도메인 패키지입니다 (PostgreSQL 'ic' 스키마).

그룹 내 법인(Company)과 법인간 정산(decontare) 인보이스를 다룹니다.
주 법인(is_primary)이 재고를 보유하고, 보조 법인 명의로 청구된 주문에 대해
매입 단가 + 마크업으로 보조 법인에 인보이스를 발행합니다.

주요 서브모듈:
- `models.py`: Company, IntercompanyInvoice, IntercompanyOrderLink 테이블.
- `settlement.py`: 정산 대상 주문 조회, 정산 계산, 인보이스 발행/입금, 주간 정산.
- `tasks.py`: 주간 정산 ARQ 작업.
"""

__title__ = "Back-office Intercompany Domain"
__description__ = "Group companies and intercompany settlement invoices."
__version__ = "0.1.0"
__all__ = []
