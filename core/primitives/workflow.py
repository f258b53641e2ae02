"""
MedRestock Workflow Primitive — Linear State Machine
======================================================
Deterministic state machine schema used by the request lifecycle
manager.

RULES:
- Transitions are deterministic (same input → same output)
- Invalid transitions are REJECTED — no skips, no reverts
- Terminal states allow no further transitions
- The definition is immutable (frozen)

This file contains NO persistence logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Sequence, Tuple


@dataclass(frozen=True)
class WorkflowDefinition:
    """
    Valid states and transitions for one workflow type.

    Fields:
        name:            Identifier for this workflow type
        initial_state:   Starting state for every new instance
        terminal_states: States from which no transition is allowed
        transitions:     {from_state → frozenset(allowed_to_states)}
    """
    name: str
    initial_state: str
    terminal_states: FrozenSet[str]
    transitions: Dict[str, FrozenSet[str]]

    def __post_init__(self):
        if not self.name:
            raise ValueError("Workflow name must be non-empty.")
        if not self.initial_state:
            raise ValueError("initial_state must be non-empty.")
        if self.initial_state not in self.transitions:
            raise ValueError(
                f"initial_state '{self.initial_state}' not in transitions."
            )
        for state in self.terminal_states:
            if self.transitions.get(state):
                raise ValueError(
                    f"terminal state '{state}' must not have outgoing transitions."
                )

    @classmethod
    def linear(cls, name: str, states: Sequence[str]) -> WorkflowDefinition:
        """Build a forward-only chain: each state may move only to the next."""
        if len(states) < 2:
            raise ValueError("A linear workflow needs at least two states.")
        if len(set(states)) != len(states):
            raise ValueError("Linear workflow states must be unique.")
        transitions = {
            current: frozenset({following})
            for current, following in zip(states, states[1:])
        }
        transitions[states[-1]] = frozenset()
        return cls(
            name=name,
            initial_state=states[0],
            terminal_states=frozenset({states[-1]}),
            transitions=transitions,
        )

    @property
    def states(self) -> Tuple[str, ...]:
        return tuple(self.transitions)

    def is_known_state(self, state: str) -> bool:
        return state in self.transitions

    def is_valid_transition(self, from_state: str, to_state: str) -> bool:
        allowed = self.transitions.get(from_state, frozenset())
        return to_state in allowed

    def is_terminal(self, state: str) -> bool:
        return state in self.terminal_states

    def allowed_next_states(self, from_state: str) -> FrozenSet[str]:
        return self.transitions.get(from_state, frozenset())

    def successor(self, from_state: str) -> Optional[str]:
        """The single next state of a linear workflow, or None at the end."""
        allowed = self.allowed_next_states(from_state)
        if len(allowed) != 1:
            return None
        return next(iter(allowed))
