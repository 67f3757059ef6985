"""
Pydantic schema definitions for API payloads.

Each domain (users, questions, results) defines its own Pydantic
models for request and response bodies.  Schemas are separated from
the stored JSON records so the API representation can evolve without
rewriting data files.
"""
