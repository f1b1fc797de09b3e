# app/core/__init__.py

"""
FastAPI 애플리케이션의 핵심 구성 요소 패키지입니다.

- `config.py`: 애플리케이션의 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 데이터베이스 연결, 세션 관리 (SQLModel 및 AsyncSQLAlchemy).
- `security.py`: 사용자 인증, 권한 코드 검사, 비밀번호 해싱 등 보안 관련 유틸리티.
- `dependencies.py`: FastAPI 의존성 주입 시스템에서 사용될 공통 의존성 함수들.
- `crud_base.py`: 공통 CRUD 기본 클래스.
- `numbering.py`: 문서 번호(PC/PV/NIR/IC) 생성.
- `cron_lock.py`: 주기 작업 중복 실행 방지를 위한 이름 기반 잠금.
"""

__title__ = "Back-office Core"
__description__ = "Core components for the back-office FastAPI application."
__version__ = "0.1.0"
__all__ = []
