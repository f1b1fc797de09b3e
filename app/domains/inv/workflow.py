# app/domains/inv/workflow.py

"""
NIR(입고 전표) 워크플로우 상태 머신.

    GENERAT -> TRIMIS_OFFICE -> VERIFICAT -> APROBAT -> IN_STOC
                                          \\-> RESPINS

각 목표 상태는 허용되는 이전 상태 목록, 선택적인 가드(guard), 선택적인 후처리(post-action)를 가집니다.
차이(has_differences)가 있는 NIR은 매니저가 차이를 승인해야 APROBAT으로 전이할 수 있습니다.
"""

import logging
from datetime import datetime, UTC
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.usr import models as usr_models
from . import models as inv_models
from . import crud as inv_crud

logger = logging.getLogger(__name__)

Status = inv_models.GoodsReceiptStatus


class WorkflowError(Exception):
    """워크플로우 규칙 위반. 라우터에서 400 응답으로 변환됩니다."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


Guard = Callable[[inv_models.GoodsReceipt], Tuple[bool, Optional[str]]]
PostAction = Callable[[inv_models.GoodsReceipt, usr_models.User, datetime], None]


def _require_supplier_invoice(nir: inv_models.GoodsReceipt) -> Tuple[bool, Optional[str]]:
    if not nir.supplier_invoice_id:
        return False, "Factura furnizor este obligatorie"
    return True, None


def _require_differences_approved(nir: inv_models.GoodsReceipt) -> Tuple[bool, Optional[str]]:
    if nir.has_differences and not nir.differences_approved_by:
        return False, "Diferentele trebuie aprobate de manager"
    return True, None


def _mark_sent_to_office(nir: inv_models.GoodsReceipt, user: usr_models.User, now: datetime) -> None:
    nir.sent_to_office_at = now


def _mark_verified(nir: inv_models.GoodsReceipt, user: usr_models.User, now: datetime) -> None:
    nir.verified_at = now
    nir.verified_by = user.id
    nir.verified_by_name = user.display_name


def _mark_transferred(nir: inv_models.GoodsReceipt, user: usr_models.User, now: datetime) -> None:
    nir.transferred_to_stock_at = now


class Transition(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed_from: Tuple[Status, ...]
    guard: Optional[Guard] = None
    post_action: Optional[PostAction] = None


TRANSITIONS: Dict[Status, Transition] = {
    Status.GENERAT: Transition(allowed_from=()),
    Status.TRIMIS_OFFICE: Transition(
        allowed_from=(Status.GENERAT,), guard=_require_supplier_invoice, post_action=_mark_sent_to_office
    ),
    Status.VERIFICAT: Transition(allowed_from=(Status.TRIMIS_OFFICE,), post_action=_mark_verified),
    Status.APROBAT: Transition(allowed_from=(Status.VERIFICAT,), guard=_require_differences_approved),
    Status.IN_STOC: Transition(allowed_from=(Status.APROBAT,), post_action=_mark_transferred),
    Status.RESPINS: Transition(allowed_from=(Status.VERIFICAT,)),
}

WORKFLOW_STATUSES = frozenset(TRANSITIONS)


def can_transition(current: Status, target: Status) -> bool:
    transition = TRANSITIONS.get(target)
    return transition is not None and current in transition.allowed_from


def get_available_transitions(nir: inv_models.GoodsReceipt) -> Dict[str, object]:
    current = Status(nir.status)
    available: List[Status] = [target for target in TRANSITIONS if can_transition(current, target)]
    return {
        "current_status": current,
        "available_transitions": available,
        "requires_difference_approval": (
            current == Status.VERIFICAT and nir.has_differences and not nir.differences_approved_by
        ),
    }


def apply_transition(
    nir: inv_models.GoodsReceipt, target: Status, user: usr_models.User, now: Optional[datetime] = None
) -> None:
    """
    NIR 객체에 전이를 적용합니다 (DB 저장은 호출자 책임).
    순서: 워크플로우 상태 여부 -> 허용 전이 여부 -> 가드.
    """
    if target not in TRANSITIONS:
        raise WorkflowError(f"Status invalid: {target}")

    current = Status(nir.status)
    if not can_transition(current, target):
        raise WorkflowError(f"Tranzitie invalida: {current.value} -> {target.value}")

    transition = TRANSITIONS[target]
    if transition.guard:
        ok, message = transition.guard(nir)
        if not ok:
            raise WorkflowError(message or "Conditie de tranzitie neindeplinita")

    nir.status = target
    if transition.post_action:
        transition.post_action(nir, user, now or datetime.now(UTC))


async def _get_for_update(db: AsyncSession, nir_id: int) -> inv_models.GoodsReceipt:
    result = await db.execute(
        select(inv_models.GoodsReceipt)
        .where(inv_models.GoodsReceipt.id == nir_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    nir = result.scalars().first()
    if nir is None:
        raise WorkflowError("NIR negasit", status_code=404)
    return nir


async def transition_nir(
    db: AsyncSession, nir_id: int, target: Status, user: usr_models.User
) -> inv_models.GoodsReceipt:
    """
    NIR의 상태를 전이하고 커밋합니다. 상태와 후처리 필드는 한 트랜잭션으로 저장됩니다.
    규칙 위반 시 객체를 변경하지 않은 채 WorkflowError가 발생합니다.
    """
    nir = await _get_for_update(db, nir_id)
    previous = nir.status
    apply_transition(nir, target, user)

    db.add(nir)
    await db.commit()
    logger.info("NIR %s: %s -> %s (user=%s)", nir.receipt_number, previous, target.value, user.login_id)
    return await inv_crud.goods_receipt.get_full(db, nir.id)


async def approve_differences(
    db: AsyncSession, nir_id: int, user: usr_models.User
) -> inv_models.GoodsReceipt:
    """VERIFICAT 상태이며 차이가 있는 NIR의 차이를 승인합니다 (매니저)."""
    nir = await _get_for_update(db, nir_id)
    if nir.status != Status.VERIFICAT:
        raise WorkflowError("Diferentele pot fi aprobate doar pentru NIR in starea VERIFICAT")
    if not nir.has_differences:
        raise WorkflowError("NIR-ul nu are diferente de aprobat")

    nir.differences_approved_at = datetime.now(UTC)
    nir.differences_approved_by = user.id
    nir.differences_approved_by_name = user.display_name
    db.add(nir)
    await db.commit()
    logger.info("NIR %s: differences approved by %s", nir.receipt_number, user.login_id)
    return await inv_crud.goods_receipt.get_full(db, nir.id)
