# app/domains/ord/__init__.py

"""
'ord' 도메인 패키지입니다 (PostgreSQL 'ord' 스키마).

판매 채널별 스토어(Store)와 주문(Order), 주문 품목(OrderLineItem)을 관리합니다.
주문에는 청구 법인(billing company)과 법인간 정산 상태, 발행된 인보이스 번호가 기록됩니다.
"""

__title__ = "Back-office Orders Domain"
__description__ = "Stores, orders and order line items."
__version__ = "0.1.0"
__all__ = []
