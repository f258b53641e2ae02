"""
MedRestock — Linear Workflow Tests
====================================
"""

import pytest

from core.primitives.workflow import WorkflowDefinition

STATES = ["pending", "processing", "prepared", "shipped", "delivered"]


class TestLinearWorkflow:
    def test_only_immediate_successor_allowed(self):
        wf = WorkflowDefinition.linear("RestockRequest", STATES)
        assert wf.is_valid_transition("pending", "processing")
        assert not wf.is_valid_transition("pending", "prepared")
        assert not wf.is_valid_transition("processing", "pending")
        assert not wf.is_valid_transition("pending", "pending")

    def test_last_state_is_terminal(self):
        wf = WorkflowDefinition.linear("RestockRequest", STATES)
        assert wf.initial_state == "pending"
        assert wf.is_terminal("delivered")
        assert wf.allowed_next_states("delivered") == frozenset()
        assert wf.successor("delivered") is None

    def test_successor_chain(self):
        wf = WorkflowDefinition.linear("RestockRequest", STATES)
        chain = [wf.initial_state]
        while wf.successor(chain[-1]):
            chain.append(wf.successor(chain[-1]))
        assert chain == STATES
        assert wf.states == tuple(STATES)

    def test_unknown_state(self):
        wf = WorkflowDefinition.linear("RestockRequest", STATES)
        assert not wf.is_known_state("cancelled")
        assert not wf.is_valid_transition("cancelled", "pending")

    def test_rejects_duplicate_states(self):
        with pytest.raises(ValueError, match="unique"):
            WorkflowDefinition.linear("X", ["a", "b", "a"])

    def test_rejects_single_state(self):
        with pytest.raises(ValueError, match="two states"):
            WorkflowDefinition.linear("X", ["a"])
