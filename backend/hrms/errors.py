"""HTTP rejection types raised by the authorization gates and validators.

Each subclasses the matching werkzeug exception so ``abort()``-style control flow and the
application error handler treat them uniformly; ``ValidationFailed`` additionally carries the
full list of violated rules.
"""
from __future__ import annotations
from typing import Iterable, List, Optional
from werkzeug import exceptions as wz
from hrms.constants.domain import ERROR_MESSAGES


class Unauthenticated(wz.Unauthorized):
    pass


class Forbidden(wz.Forbidden):
    pass


class NotFound(wz.NotFound):
    pass


class InternalError(wz.InternalServerError):
    pass


class ValidationFailed(wz.BadRequest):
    def __init__(self, errors: Iterable[str], description: Optional[str] = ERROR_MESSAGES['VALIDATION_FAILED']):
        super().__init__(description=description)
        self.errors: List[str] = list(errors)


__all__ = ['Unauthenticated', 'Forbidden', 'NotFound', 'InternalError', 'ValidationFailed']
