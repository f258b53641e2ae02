"""
MedRestock Core Primitives
============================
Pure Python building blocks shared by the engines (no Django dependency).

Primitives:
    workflow    — Forward-only state machine schema
"""

from core.primitives.workflow import WorkflowDefinition

__all__ = ["WorkflowDefinition"]
