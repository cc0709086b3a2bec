"""Services Layer: store-mutating sequences behind the HTTP routes.

Invariants:
    - One service class per component, constructed per request via Depends
    - Services receive the store session and collaborators explicitly
"""
