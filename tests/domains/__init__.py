# tests/domains/__init__.py

"""
도메인별 테스트 모듈 패키지입니다.

- `test_usr_n.py`: 로그인, 권한 코드, 사용자 관리.
- `test_shared_n.py`: cron 잠금, 애플리케이션 설정, 알림.
- `test_ord_n.py`: 스토어, 주문, 인보이스 기록.
- `test_shp_n.py`: AWB 스캔, 일일 인계 마감/재개, 자동 마감, C0 알림.
- `test_inv_n.py`: 발주, 입고 검수, NIR 워크플로, 재고 반영.
- `test_ic_n.py`: 법인간 정산 집계, 인보이스 발행/지급, 주간 정산.
"""

__title__ = "Back-office Domain Tests"
__description__ = "Categorized tests for each business domain of the back-office API."
__version__ = "0.1.0"
__all__ = []
