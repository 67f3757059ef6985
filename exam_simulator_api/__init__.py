"""
Top-level package for the Exam Simulator API.

All functionality lives in submodules under ``app``; import the
ASGI application as ``exam_simulator_api.app.main:app``.
"""

__all__ = []
