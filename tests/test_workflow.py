"""Tests for the workflow stage catalog, transition graph and prerequisite rules."""
import itertools
import pytest
from types import MappingProxyType
from app.core.workflow import (
    ALLOWED_TRANSITIONS,
    ACTUAL_COST_REQUIRED,
    DIAGNOSTIC_REQUIRED,
    ESTIMATED_COST_REQUIRED,
    TECHNICIAN_REQUIRED,
    WORKFLOW_STAGES,
    WorkOrderSnapshot,
    WorkOrderStage as S,
    can_transition,
    check_prerequisites,
    coerce_stage,
    is_completed,
    is_current,
    is_future,
    next_possible_statuses,
    reachable_from,
    stage_index,
)


def test_stage_order_and_index():
    """Stages are indexed 0..5 in pipeline order with no duplicates."""
    assert WORKFLOW_STAGES == (S.TRIAGE, S.QUOTATION, S.EXECUTION, S.QA, S.CLOSURE, S.WARRANTY)
    indexes = [stage_index(s) for s in WORKFLOW_STAGES]
    assert indexes == [0, 1, 2, 3, 4, 5]
    assert len(set(indexes)) == len(WORKFLOW_STAGES)


def test_stage_index_accepts_string_values():
    assert stage_index("QA") == 3
    assert coerce_stage("CLOSURE") is S.CLOSURE


def test_unknown_stage_raises_value_error():
    with pytest.raises(ValueError):
        stage_index("DONE")


def test_transition_table_is_read_only():
    assert isinstance(ALLOWED_TRANSITIONS, MappingProxyType)
    with pytest.raises(TypeError):
        ALLOWED_TRANSITIONS[S.WARRANTY] = (S.TRIAGE,)


def test_reachable_from_matches_graph():
    assert reachable_from(S.TRIAGE) == {S.QUOTATION}
    assert reachable_from(S.QUOTATION) == {S.EXECUTION, S.TRIAGE}
    assert reachable_from(S.EXECUTION) == {S.QA, S.QUOTATION}
    assert reachable_from(S.QA) == {S.CLOSURE, S.EXECUTION}
    assert reachable_from(S.CLOSURE) == {S.WARRANTY}
    assert reachable_from(S.WARRANTY) == frozenset()


def test_current_completed_future_for_same_stage():
    for s in WORKFLOW_STAGES:
        assert is_current(s, s)
        assert not is_completed(s, s)
        assert not is_future(s, s)


def test_completed_and_future_are_exclusive_for_distinct_stages():
    for a, b in itertools.permutations(WORKFLOW_STAGES, 2):
        assert is_completed(b, a) != is_future(b, a), f"{b} relative to {a}"
        assert not is_current(b, a)


def test_warranty_is_terminal():
    for s in WORKFLOW_STAGES:
        assert not can_transition(S.WARRANTY, s)
    assert next_possible_statuses(S.WARRANTY) == []


def test_no_stage_skipping():
    assert can_transition(S.TRIAGE, S.QUOTATION)
    assert not can_transition(S.TRIAGE, S.EXECUTION)
    assert not can_transition(S.CLOSURE, S.QA)


def test_next_possible_statuses_forward_before_rework():
    assert next_possible_statuses(S.QUOTATION) == [S.EXECUTION, S.TRIAGE]
    assert next_possible_statuses(S.EXECUTION) == [S.QA, S.QUOTATION]
    assert next_possible_statuses(S.QA) == [S.CLOSURE, S.EXECUTION]


def test_every_edge_is_listed_and_allowed():
    for source, targets in ALLOWED_TRANSITIONS.items():
        for target in targets:
            assert target in next_possible_statuses(source)
            assert can_transition(source, target)


def test_quotation_requires_estimated_cost():
    result = check_prerequisites(S.TRIAGE, S.QUOTATION, {"estimated_cost": None})
    assert not result.allowed
    assert ESTIMATED_COST_REQUIRED in result.reasons

    result = check_prerequisites(S.TRIAGE, S.QUOTATION, {"estimated_cost": 0})
    assert not result.allowed

    result = check_prerequisites(S.TRIAGE, S.QUOTATION, {"estimated_cost": 5000})
    assert result.allowed
    assert result.reasons == ()


def test_execution_requires_technician():
    result = check_prerequisites(S.QUOTATION, S.EXECUTION, {"technician_id": None})
    assert not result.allowed
    assert result.reasons == (TECHNICIAN_REQUIRED,)


def test_qa_requires_a_diagnostic():
    result = check_prerequisites(S.EXECUTION, S.QA, {"diagnostics": []})
    assert not result.allowed
    assert result.reasons == (DIAGNOSTIC_REQUIRED,)

    result = check_prerequisites(S.EXECUTION, S.QA, {"diagnostics": [{"id": "d1"}]})
    assert result.allowed


def test_closure_requires_actual_cost():
    result = check_prerequisites(S.QA, S.CLOSURE, WorkOrderSnapshot())
    assert result.reasons == (ACTUAL_COST_REQUIRED,)
    assert check_prerequisites(S.QA, S.CLOSURE, WorkOrderSnapshot(actual_cost=1200.0)).allowed


def test_warranty_has_no_field_guard():
    assert check_prerequisites(S.CLOSURE, S.WARRANTY, {}).allowed
    assert check_prerequisites(S.CLOSURE, S.WARRANTY, None).allowed


def test_reasons_are_collected_not_short_circuited():
    """A forbidden edge into a guarded stage reports both problems, field guard first."""
    result = check_prerequisites(S.TRIAGE, S.EXECUTION, {})
    assert not result.allowed
    assert result.reasons == (
        TECHNICIAN_REQUIRED,
        "transition from TRIAGE to EXECUTION is not permitted",
    )


def test_forbidden_edge_without_guard_only_reports_graph_reason():
    result = check_prerequisites(S.WARRANTY, S.TRIAGE, {})
    assert result.reasons == ("transition from WARRANTY to TRIAGE is not permitted",)


def test_rework_loop_rechecks_target_guard():
    """Going back to QUOTATION re-validates the estimated cost."""
    assert not check_prerequisites(S.EXECUTION, S.QUOTATION, {}).allowed
    assert check_prerequisites(S.EXECUTION, S.QUOTATION, {"estimated_cost": 10}).allowed


def test_snapshot_from_camel_case_mapping():
    snapshot = WorkOrderSnapshot.from_mapping({
        "estimatedCost": 3000,
        "actualCost": None,
        "technicianId": "tech-1",
        "diagnostics": [{"id": "d1"}, {"id": "d2"}],
    })
    assert snapshot.estimated_cost == 3000
    assert snapshot.actual_cost is None
    assert snapshot.technician_id == "tech-1"
    assert snapshot.diagnostics == ("d1", "d2")


def test_end_to_end_scenario():
    """TRIAGE -> QUOTATION -> EXECUTION, fixing the missing data between attempts."""
    order = {"estimated_cost": None, "technician_id": None}
    current = S.TRIAGE

    result = check_prerequisites(current, S.QUOTATION, order)
    assert result.reasons == (ESTIMATED_COST_REQUIRED,)

    order["estimated_cost"] = 3000
    assert check_prerequisites(current, S.QUOTATION, order).allowed
    current = S.QUOTATION

    assert not check_prerequisites(current, S.EXECUTION, order).allowed
    order["technician_id"] = "tech-7"
    assert check_prerequisites(current, S.EXECUTION, order).allowed
