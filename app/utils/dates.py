# app/utils/dates.py

"""
업무 시간대(settings.TIMEZONE) 기준의 날짜 계산 유틸리티.

DB에는 모든 시각이 UTC(timestamptz)로 저장되며, '오늘'은 업무 시간대의
자정부터 24시간 구간으로 정의합니다.
"""

from datetime import date, datetime, time, timedelta, UTC
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from app.core.config import settings


def business_tz() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def now_utc() -> datetime:
    return datetime.now(UTC)


def to_local(value: datetime) -> datetime:
    """UTC(또는 aware) 시각을 업무 시간대로 변환합니다. naive 값은 UTC로 간주합니다."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(business_tz())


def local_today(now: Optional[datetime] = None) -> date:
    return to_local(now or now_utc()).date()


def day_window(day: date) -> Tuple[datetime, datetime]:
    """주어진 업무일의 [자정, 다음날 자정) 구간을 aware datetime으로 반환합니다."""
    start = datetime.combine(day, time.min, tzinfo=business_tz())
    return start, start + timedelta(days=1)


def today_window(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    return day_window(local_today(now))


def format_local_date(value: datetime) -> str:
    """DD.MM.YYYY"""
    return to_local(value).strftime("%d.%m.%Y")


def format_local_time(value: datetime) -> str:
    """HH:MM"""
    return to_local(value).strftime("%H:%M")
