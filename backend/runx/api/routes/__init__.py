"""Route Modules: one file per resource.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - JSON field names follow the public storefront contract (clienteId, productos, ...)
"""
