"""
Service layer abstraction.

Each service encapsulates business logic for a domain and reaches
persisted data only through the record store from ``core.store``.
API handlers call services and translate nothing but the request and
response shapes.
"""
