"""Pydantic Schemas: request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies, API responses)
    - Field names mirror the storefront JSON contract (clienteId, producto_id, ...)

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
