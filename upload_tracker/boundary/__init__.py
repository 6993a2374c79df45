"""
Boundary layer for external system integrations.

Handles all interactions with external systems (database, object store).
Provides adapters and clients for infrastructure dependencies.
"""
