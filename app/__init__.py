# app/__init__.py

"""
Back-office FastAPI 애플리케이션의 메인 패키지입니다.

멀티 채널 전자상거래 백오피스(입고/NIR, 재고, 주문, AWB 인계, 법인간 정산)를
구성하는 패키지로, 애플리케이션의 진입점(main.py), 공통 설정/DB/보안을 담는
core 서브패키지, 그리고 각 비즈니스 도메인을 대표하는 domains 서브패키지로 구성됩니다.
"""

APP_NAME = "Back-office API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # API 라우트의 공통 접두사 (main.py에서 적용)

# PEP 440 버전 정보 (pyproject.toml과 동일하게 유지)
__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Multi-channel e-commerce back-office API backend."
__license__ = "MIT"
__all__ = []
