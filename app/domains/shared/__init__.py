# app/domains/shared/__init__.py

"""
FastAPI 애플리케이션의 'shared' 도메인 패키지입니다 (PostgreSQL 'shared' 스키마).

여러 도메인이 함께 쓰는 데이터를 관리합니다.

주요 서브모듈:
- `models.py`: cron 잠금, 알림, 애플리케이션 설정(단일 행) 테이블.
- `schemas.py`: 요청/응답 Pydantic 모델.
- `crud.py`: 알림 조회/읽음 처리, 설정 조회/저장.
- `tasks.py`: 알림 발송, 만료 잠금 정리 ARQ 작업.
- `routers.py`: API 엔드포인트.
"""

__title__ = "Back-office Shared Domain"
__description__ = "Notifications, application settings and cron lock administration."
__version__ = "0.1.0"
__all__ = []
