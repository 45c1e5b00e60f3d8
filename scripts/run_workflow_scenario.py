#!/usr/bin/env python3
"""
Walk a work order through the repair pipeline against the configured database.
Usage: python scripts/run_workflow_scenario.py [--locale en]
"""
import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy.orm import Session
from app.db.session import SessionLocal, engine, Base
from app.db.models import Diagnostic, WorkOrder
from app.core.engine import StatusTransitionEngine, TransitionRejected
from app.core.labels import stage_label
from app.core.workflow import WorkOrderStage

# Create tables if they don't exist
Base.metadata.create_all(bind=engine)


def attempt(transitions: StatusTransitionEngine, target: WorkOrderStage, locale: str) -> bool:
    try:
        work_order = transitions.apply(target)
    except TransitionRejected as e:
        print(f"  x {stage_label(target, locale)}: {', '.join(e.reasons)}")
        return False
    print(f"  -> {stage_label(work_order.status, locale)}")
    return True


def run_scenario(locale: str) -> None:
    db: Session = SessionLocal()
    try:
        work_order = WorkOrder(customer_id="demo-customer", device_id="demo-device", description="Unit does not power on")
        db.add(work_order)
        db.commit()
        db.refresh(work_order)
        print(f"Created work order {work_order.wo_id} at {stage_label(work_order.status, locale)}")

        transitions = StatusTransitionEngine(db=db, work_order_id=work_order.id)

        attempt(transitions, WorkOrderStage.QUOTATION, locale)
        work_order.estimated_cost = 3000
        db.commit()
        attempt(transitions, WorkOrderStage.QUOTATION, locale)

        attempt(transitions, WorkOrderStage.EXECUTION, locale)
        work_order.technician_id = "demo-technician"
        db.commit()
        attempt(transitions, WorkOrderStage.EXECUTION, locale)

        attempt(transitions, WorkOrderStage.QA, locale)
        db.add(Diagnostic(work_order_id=work_order.id, fault_type="PSU", recommended_parts=["PSU-1200W"]))
        db.commit()
        db.refresh(work_order)
        attempt(transitions, WorkOrderStage.QA, locale)

        attempt(transitions, WorkOrderStage.CLOSURE, locale)
        work_order.actual_cost = 3200
        db.commit()
        attempt(transitions, WorkOrderStage.CLOSURE, locale)
        attempt(transitions, WorkOrderStage.WARRANTY, locale)
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--locale", default="en")
    args = parser.parse_args()
    run_scenario(args.locale)
