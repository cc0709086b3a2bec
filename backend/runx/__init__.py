"""RunX Store API package.

Invariants:
    - Importing the package root has no side effects (no app, engine or settings built)
"""

__version__ = "1.0.0"
