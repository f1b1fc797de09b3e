# tests/__init__.py

"""
Back-office FastAPI 애플리케이션의 테스트 스위트 패키지입니다.

테스트는 `pytest`와 `pytest-asyncio`를 기반으로 작성되며, 실제 PostgreSQL 테스트 DB에
연결하여 테스트마다 SAVEPOINT로 격리됩니다.

- `conftest.py`: DB 세션, 역할별 인증 클라이언트, 공통 데이터 fixture.
- `domains/`: 도메인별(usr, shared, ord, shp, inv, ic) 테스트 모듈.
- `test_main.py`: 루트/헬스 체크 엔드포인트와 ARQ 워커 등록 확인.
"""

__title__ = "Back-office API Tests"
__description__ = "Test suite for the back-office FastAPI application."
__version__ = "0.1.0"
__all__ = []
