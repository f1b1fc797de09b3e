# app/utils/__init__.py

"""
FastAPI 애플리케이션의 'utils' 패키지입니다.

특정 비즈니스 도메인에 속하지 않는, 프로젝트 전반에서 재사용되는 범용 유틸리티 함수들을 포함합니다.

주요 서브모듈:
- `files.py`: 업로드 파일 저장/삭제 유틸리티 (aiofiles).
- `dates.py`: 업무 시간대 기준 '오늘' 구간 계산 및 날짜 표기 유틸리티.
"""

# flake8: noqa
from . import files
from . import dates

__title__ = "Back-office Application Utilities"
__description__ = "Provides common, reusable utility functions for the application."
__version__ = "0.1.0"
__all__ = ["files", "dates"]
