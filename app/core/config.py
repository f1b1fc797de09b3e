# app/core/config.py

from typing import Any
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# 프로젝트의 루트 디렉토리 경로를 계산합니다.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    애플리케이션의 모든 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 .env 파일에서 값을 자동으로 로드합니다.
    """

    # --- Pydantic Settings 설정 ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),  # 프로젝트 루트의 .env 파일을 명시적으로 지정
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = "Back-office API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Multi-channel e-commerce back-office API"
    APP_ENV: str = Field("development", description="Application environment (e.g., development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Enable debug mode for detailed logging and error messages")

    # --- 데이터베이스 설정 ---
    DATABASE_URL: SecretStr = Field(..., description="PostgreSQL database connection URL")

    # --- JWT (JSON Web Token) 설정 ---
    SECRET_KEY: SecretStr = Field(..., description="Secret key for JWT token signing. Keep this highly secure!")
    ALGORITHM: str = Field("HS256", description="Algorithm used for JWT signing (e.g., HS256)")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(30, description="Access token expiration time in minutes")

    # --- ARQ / Redis 설정 ---
    REDIS_HOST: str = Field("localhost", description="Redis host for the ARQ job queue")
    REDIS_PORT: int = Field(6379, description="Redis port for the ARQ job queue")

    # --- 파일 업로드 설정 ---
    UPLOAD_DIR: str = Field("/app/data/uploads", description="Directory for uploaded reception photos.")

    # --- 업무 설정 ---
    # 업무일(오늘)의 경계를 결정하는 시간대
    TIMEZONE: str = Field("Europe/Bucharest", description="Business timezone used for day boundaries")
    # 인계(predare) 자동 마감 시각 (HH:MM). shared.app_settings 값이 있으면 그 값이 우선합니다.
    HANDOVER_AUTO_CLOSE_TIME: str = Field("20:00", description="Default handover auto-close time (HH:MM)")
    CRON_LOCK_TTL_MINUTES: int = Field(10, description="Cron lock time-to-live in minutes")
    INTERCOMPANY_DEFAULT_MARKUP: float = Field(10.0, description="Default intercompany markup percent")

    @field_validator("HANDOVER_AUTO_CLOSE_TIME")
    @classmethod
    def _check_close_time(cls, value: str) -> str:
        hour, _, minute = value.partition(":")
        if not (hour.isdigit() and minute.isdigit() and 0 <= int(hour) <= 23 and 0 <= int(minute) <= 59):
            raise ValueError("HANDOVER_AUTO_CLOSE_TIME must be HH:MM")
        return value

    # Post-initialization validation (Pydantic v2 BaseSettings)
    def model_post_init(self, __context: Any) -> None:  # noqa: ANN001
        # APP_ENV가 development이고, UPLOAD_DIR이 기본값인 경우 로컬 경로로 변경
        if self.APP_ENV == "development" and self.UPLOAD_DIR == "/app/data/uploads":
            self.UPLOAD_DIR = os.path.join(BASE_DIR, "data", "uploads")


settings = Settings()
