# app/domains/shp/courier_statuses.py

"""
택배사(FanCourier) 상태 코드표와 AWB 상태 매핑.

코드별 이름, 설명, 범주(category), 최종 여부를 보관합니다.
범주는 AWB의 current_status로 변환되며, 픽업 코드(C0/C1)는 미스캔 픽업 경보에 사용됩니다.
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict


class CourierCategory(str, Enum):
    PICKUP = "pickup"
    TRANSIT = "transit"
    DELIVERY = "delivery"
    NOTICE = "notice"
    PROBLEM = "problem"
    RETURN = "return"
    CANCEL = "cancel"
    OTHER = "other"


Cat = CourierCategory


class CourierStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    category: CourierCategory
    is_final: bool
    name: str
    description: str


def _s(code: str, category: CourierCategory, is_final: bool, name: str, description: str) -> CourierStatus:
    return CourierStatus(code=code, category=category, is_final=is_final, name=name, description=description)


UNKNOWN_STATUS_NAME = "Status necunoscut"
PICKUP_CODES = frozenset({"C0", "C1"})

_STATUSES = (
    _s("C0", Cat.PICKUP, False, "Expediție ridicată",
       "Curierul a preluat coletul de la expeditor"),
    _s("C1", Cat.PICKUP, False, "Expediție preluată spre livrare",
       "Coletul a fost preluat de curier pentru livrare către destinatar"),
    _s("H0", Cat.TRANSIT, False, "În tranzit spre depozitul de destinație",
       "Coletul este în drum spre depozitul din zona destinatarului"),
    _s("H1", Cat.TRANSIT, False, "Descărcată în depozitul de destinație",
       "Coletul a ajuns și a fost descărcat în depozitul de destinație"),
    _s("H2", Cat.TRANSIT, False, "În tranzit",
       "Coletul este în transport între depozite"),
    _s("H3", Cat.TRANSIT, False, "Sortată pe bandă",
       "Coletul este în procesul de sortare în depozit"),
    _s("H4", Cat.TRANSIT, False, "Sortată pe bandă",
       "Coletul este în procesul de sortare în depozit"),
    _s("H10", Cat.TRANSIT, False, "În tranzit spre depozitul de destinație",
       "Coletul este în drum spre depozitul din zona destinatarului"),
    _s("H11", Cat.TRANSIT, False, "Descărcată în depozitul de destinație",
       "Coletul a ajuns și a fost descărcat în depozitul de destinație"),
    _s("H12", Cat.TRANSIT, False, "În depozit",
       "Coletul se află în depozit, în așteptarea livrării"),
    _s("H13", Cat.TRANSIT, False, "În depozit",
       "Coletul se află în depozit, în așteptarea livrării"),
    _s("H15", Cat.TRANSIT, False, "În depozit",
       "Coletul se află în depozit, în așteptarea livrării"),
    _s("H17", Cat.TRANSIT, False, "În depozitul de destinație",
       "Coletul a ajuns în depozitul final și este gata de livrare"),
    _s("S1", Cat.DELIVERY, False, "În livrare",
       "Curierul este pe drum către destinatar cu coletul"),
    _s("S2", Cat.DELIVERY, True, "Livrat",
       "Coletul a fost livrat cu succes destinatarului"),
    _s("S8", Cat.DELIVERY, False, "Livrare din sediul FAN Courier",
       "Destinatarul va ridica coletul de la un sediu FAN Courier"),
    _s("S35", Cat.DELIVERY, False, "Retrimis în livrare",
       "După o încercare eșuată, coletul a fost trimis din nou pentru livrare"),
    _s("S46", Cat.DELIVERY, False, "Predat punct livrare",
       "Coletul a fost predat la un FANbox sau punct PayPoint"),
    _s("S47", Cat.DELIVERY, False, "Predat partener extern",
       "Coletul a fost predat către un curier partener pentru livrare"),
    _s("S3", Cat.NOTICE, False, "Avizat",
       "Destinatarul a fost contactat, livrarea a fost reprogramată"),
    _s("S11", Cat.NOTICE, False, "Avizat și trimis SMS",
       "S-a trimis SMS destinatarului cu detalii despre livrare"),
    _s("S12", Cat.NOTICE, False, "Contactat; livrare ulterioară",
       "Destinatarul a fost contactat și a cerut o reprogramare a livrării"),
    _s("S21", Cat.NOTICE, False, "Avizat, lipsă persoană de contact",
       "Curierul a încercat livrarea dar nu a răspuns nimeni"),
    _s("S22", Cat.NOTICE, False, "Avizat, nu are bani de ramburs",
       "Destinatarul nu avea suma necesară pentru plata rambursului"),
    _s("S24", Cat.NOTICE, False, "Avizat, nu are împuternicire/CI",
       "Destinatarul nu avea documentele de identificare necesare"),
    _s("S30", Cat.NOTICE, False, "Nu răspunde la telefon",
       "Curierul nu a putut contacta destinatarul telefonic"),
    _s("S4", Cat.PROBLEM, False, "Adresă incompletă",
       "Adresa de livrare este incompletă și trebuie verificată/completată"),
    _s("S5", Cat.PROBLEM, False, "Adresă greșită, destinatar mutat",
       "Persoana nu mai locuiește la adresa specificată"),
    _s("S9", Cat.PROBLEM, False, "Redirecționat",
       "Coletul a fost redirecționat către o altă adresă"),
    _s("S10", Cat.PROBLEM, False, "Adresă greșită, fără telefon",
       "Adresa este greșită și nu există un număr de telefon pentru contact"),
    _s("S14", Cat.PROBLEM, False, "Restricții acces la adresă",
       "Curierul nu poate ajunge la adresă (complex închis, restricții, etc.)"),
    _s("S19", Cat.PROBLEM, False, "Adresă incompletă - trimis SMS",
       "S-a trimis SMS destinatarului pentru clarificarea adresei"),
    _s("S20", Cat.PROBLEM, False, "Adresă incompletă, fără telefon",
       "Adresa este incompletă și nu există număr de telefon pentru contact"),
    _s("S25", Cat.PROBLEM, False, "Adresă greșită - trimis SMS",
       "S-a trimis SMS destinatarului pentru obținerea adresei corecte"),
    _s("S27", Cat.PROBLEM, False, "Adresă greșită, nr telefon greșit",
       "Atât adresa cât și numărul de telefon sunt greșite"),
    _s("S28", Cat.PROBLEM, False, "Adresă incompletă, nr telefon greșit",
       "Adresa este incompletă și numărul de telefon este greșit"),
    _s("S42", Cat.PROBLEM, False, "Adresă greșită",
       "Adresa de livrare nu există sau este complet greșită"),
    _s("S6", Cat.RETURN, True, "Refuz primire",
       "Destinatarul a refuzat să primească coletul"),
    _s("S7", Cat.RETURN, True, "Refuz plată transport",
       "Destinatarul a refuzat să plătească taxa de transport"),
    _s("S15", Cat.RETURN, True, "Refuz predare ramburs",
       "Destinatarul a refuzat să plătească suma ramburs"),
    _s("S16", Cat.RETURN, True, "Retur la termen",
       "S-a depășit termenul de păstrare și coletul se întoarce la expeditor"),
    _s("S33", Cat.RETURN, True, "Retur solicitat",
       "Expeditorul a solicitat returnarea coletului"),
    _s("S43", Cat.RETURN, True, "Retur",
       "Coletul se întoarce la expeditor"),
    _s("S50", Cat.RETURN, True, "Refuz confirmare",
       "Destinatarul a refuzat confirmarea la livrare (ePOD)"),
    _s("S37", Cat.OTHER, False, "Despăgubit",
       "Coletul a fost pierdut/deteriorat și se plătește despăgubire"),
    _s("S38", Cat.OTHER, False, "AWB neexpediat",
       "AWB-ul a fost creat dar coletul nu a fost ridicat de curier"),
    _s("S49", Cat.OTHER, False, "Activitate suspendată",
       "Livrările sunt temporar suspendate în zona respectivă"),
    _s("A0", Cat.CANCEL, True, "AWB anulat",
       "AWB-ul a fost anulat din sistem"),
    _s("A1", Cat.CANCEL, True, "AWB anulat de expeditor",
       "Expeditorul a solicitat anularea AWB-ului"),
    _s("A2", Cat.CANCEL, True, "AWB anulat de destinatar",
       "Destinatarul a solicitat anularea livrării"),
    _s("A3", Cat.CANCEL, True, "AWB anulat de FanCourier",
       "FanCourier a anulat AWB-ul din motive operaționale"),
    _s("A4", Cat.CANCEL, True, "AWB șters",
       "AWB-ul a fost șters din borderou"),
)

COURIER_STATUSES: Dict[str, CourierStatus] = {s.code: s for s in _STATUSES}


def get_courier_status(code: str) -> Optional[CourierStatus]:
    return COURIER_STATUSES.get(code)


def is_pickup_status(code: str) -> bool:
    return code in PICKUP_CODES


def is_final_status(code: str) -> bool:
    status = COURIER_STATUSES.get(code)
    return bool(status and status.is_final)


def map_to_awb_status(status: CourierStatus) -> Optional[str]:
    """
    택배사 상태를 AWB current_status 값으로 변환합니다.
    'other' 범주는 None(현재 상태 유지)을 반환합니다.
    """
    if status.category in (Cat.PICKUP, Cat.TRANSIT, Cat.NOTICE, Cat.PROBLEM):
        return "in_transit"
    if status.category == Cat.DELIVERY:
        return "delivered" if status.is_final else "in_transit"
    if status.category == Cat.RETURN:
        return "returned"
    if status.category == Cat.CANCEL:
        return "cancelled"
    return None
