"""Core Layer: domain types, order rules, errors and collaborator Protocols.

Invariants:
    - Nothing in core/ performs IO or imports from services/, api/ or infrastructure/
    - Rule functions are pure and deterministic
"""
