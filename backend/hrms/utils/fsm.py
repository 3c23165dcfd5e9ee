"""Status lifecycle guard for leave requests and other reviewable records.

Usage:
    from hrms.utils.fsm import TransitionValidator
    LEAVE_FSM = TransitionValidator({
        'pending': {'approved', 'rejected', 'cancelled'},
        'approved': {'cancelled'},
    })
    LEAVE_FSM.assert_can_transition(leave.status, 'approved')

Aborts with 400 when the move is not in the graph.
"""
from __future__ import annotations
from typing import Dict, Set
from flask import abort

class TransitionValidator:
    def __init__(self, graph: Dict[str, Set[str]], field_name: str = 'status'):
        self.graph = graph
        self.field_name = field_name

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.graph.get(current, set())

    def assert_can_transition(self, current: str, target: str, message: str = None):
        if not self.can_transition(current, target):
            abort(400, description=message or f"Cannot change {self.field_name} from {current} to {target}")
        return True

__all__ = ['TransitionValidator']
