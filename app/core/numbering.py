# app/core/numbering.py

"""
문서 번호 생성 모듈.

- 일자별 순번: PREFIX-DD/MM/YYYY-NNNN (발주 PC, 입고 보고서 PV, NIR)
- 월별 순번:   NIR-YYYYMM-NNNN (직접 입고)
- 연도별:      IC-YYYY-NNNNN (법인간 정산 인보이스, 같은 연도 건수 + 1)
- 일자별 3자리: TRF-YYYYMMDD-NNN (창고 간 이동)

순번은 같은 접두사를 가진 마지막 번호를 조회하여 1을 더합니다.
"""

from datetime import date
from typing import Any, Optional, Type

from sqlmodel import SQLModel, select, func
from sqlmodel.ext.asyncio.session import AsyncSession

from app.utils.dates import local_today


def daily_prefix(code: str, day: date) -> str:
    return f"{code}-{day.strftime('%d/%m/%Y')}-"


def monthly_prefix(code: str, day: date) -> str:
    return f"{code}-{day.strftime('%Y%m')}-"


def next_sequence(last_number: Optional[str], prefix: str) -> int:
    """마지막 번호의 숫자 꼬리를 해석하여 다음 순번을 반환합니다."""
    if not last_number or not last_number.startswith(prefix):
        return 1
    tail = last_number[len(prefix):]
    return int(tail) + 1 if tail.isdigit() else 1


async def generate_document_number(
    db: AsyncSession,
    model: Type[SQLModel],
    field: str,
    prefix: str,
    width: int = 4,
) -> str:
    """
    model.field 컬럼에서 prefix로 시작하는 가장 큰 번호를 찾아 다음 번호를 생성합니다.
    순번은 고정 폭(zero-pad)이므로 문자열 정렬이 숫자 정렬과 같습니다.
    """
    column: Any = getattr(model, field)
    statement = (
        select(column)
        .where(column.like(f"{prefix}%"))
        .order_by(column.desc())
        .limit(1)
    )
    result = await db.execute(statement)
    last_number = result.scalars().first()
    return f"{prefix}{next_sequence(last_number, prefix):0{width}d}"


async def generate_daily_number(
    db: AsyncSession, model: Type[SQLModel], field: str, code: str, day: Optional[date] = None
) -> str:
    return await generate_document_number(db, model, field, daily_prefix(code, day or local_today()))


async def generate_monthly_number(
    db: AsyncSession, model: Type[SQLModel], field: str, code: str, day: Optional[date] = None
) -> str:
    return await generate_document_number(db, model, field, monthly_prefix(code, day or local_today()))


async def generate_yearly_count_number(
    db: AsyncSession, model: Type[SQLModel], field: str, code: str, year: Optional[int] = None
) -> str:
    """IC-YYYY-NNNNN. 순번은 같은 연도 번호의 건수 + 1 이며 해마다 00001부터 다시 시작합니다."""
    year = year or local_today().year
    column: Any = getattr(model, field)
    result = await db.execute(
        select(func.count()).select_from(model).where(column.like(f"{code}-{year}-%"))
    )
    count = result.scalar_one()
    return f"{code}-{year}-{count + 1:05d}"
