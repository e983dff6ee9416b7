"""
db/ - Database Layer
====================
Handles the PostgreSQL client, transaction boundaries, error classification
and the table access probe.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
