"""
domain/errors.py
================
The single error kind raised by the calculation engine.
"""
from __future__ import annotations


class InvalidInputError(ValueError):
    """
    Rejected input: geometry, temperature range or ordering, U-value,
    air-change rate, or emitter temperature configuration.

    Always a deterministic consequence of the inputs. HTTP callers should
    surface ``str(err)`` with ``status_code``.
    """

    status_code: int = 400
