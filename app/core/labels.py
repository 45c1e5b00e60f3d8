"""
Display strings for workflow stages, per locale.

Presentation data only; the workflow rules never read these tables.
"""
from __future__ import annotations
from types import MappingProxyType
from typing import Mapping, Optional
from app.core.config import settings
from app.core.workflow import WorkOrderStage, coerce_stage

FALLBACK_LOCALE = "en"

STAGE_LABELS: Mapping[str, Mapping[WorkOrderStage, str]] = MappingProxyType({
    "th": MappingProxyType({
        WorkOrderStage.TRIAGE: "วินิจฉัย",
        WorkOrderStage.QUOTATION: "เสนอราคา",
        WorkOrderStage.EXECUTION: "ดำเนินการ",
        WorkOrderStage.QA: "ตรวจสอบ",
        WorkOrderStage.CLOSURE: "ปิดงาน",
        WorkOrderStage.WARRANTY: "รับประกัน",
    }),
    "en": MappingProxyType({
        WorkOrderStage.TRIAGE: "Triage",
        WorkOrderStage.QUOTATION: "Quotation",
        WorkOrderStage.EXECUTION: "Execution",
        WorkOrderStage.QA: "Quality check",
        WorkOrderStage.CLOSURE: "Closure",
        WorkOrderStage.WARRANTY: "Warranty",
    }),
})

STAGE_DESCRIPTIONS: Mapping[str, Mapping[WorkOrderStage, str]] = MappingProxyType({
    "th": MappingProxyType({
        WorkOrderStage.TRIAGE: "ขั้นตอนการวินิจฉัยปัญหาและบันทึกข้อมูลเบื้องต้น",
        WorkOrderStage.QUOTATION: "ขั้นตอนการเสนอราคาและขออนุมัติจากลูกค้า",
        WorkOrderStage.EXECUTION: "ขั้นตอนการดำเนินการซ่อม",
        WorkOrderStage.QA: "ขั้นตอนการตรวจสอบคุณภาพหลังการซ่อม",
        WorkOrderStage.CLOSURE: "ขั้นตอนการปิดงานและส่งมอบอุปกรณ์",
        WorkOrderStage.WARRANTY: "ขั้นตอนการรับประกันหลังการซ่อม",
    }),
    "en": MappingProxyType({
        WorkOrderStage.TRIAGE: "Diagnose the problem and record the intake details",
        WorkOrderStage.QUOTATION: "Quote the repair and get customer approval",
        WorkOrderStage.EXECUTION: "Carry out the repair",
        WorkOrderStage.QA: "Check repair quality",
        WorkOrderStage.CLOSURE: "Close the job and hand the device back",
        WorkOrderStage.WARRANTY: "Post-repair warranty period",
    }),
})


def resolve_locale(locale: Optional[str] = None) -> str:
    locale = (locale or settings.default_locale).lower()
    return locale if locale in STAGE_LABELS else FALLBACK_LOCALE


def stage_label(stage: WorkOrderStage | str, locale: Optional[str] = None) -> str:
    return STAGE_LABELS[resolve_locale(locale)][coerce_stage(stage)]


def stage_description(stage: WorkOrderStage | str, locale: Optional[str] = None) -> str:
    return STAGE_DESCRIPTIONS[resolve_locale(locale)][coerce_stage(stage)]
