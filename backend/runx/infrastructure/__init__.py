"""Infrastructure Layer: store, logging and third-party adapters.

Invariants:
    - Adapters satisfy the Protocols in core/collaborators.py
    - External calls are bounded by a timeout and mapped onto core/errors.py
"""
