"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Persistence lives in ``core.store``, business logic in
``services`` and HTTP handling in ``api/<version>/endpoints``.
"""

from .main import app  # noqa: F401
