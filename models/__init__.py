"""Data models and room registry logic.

This package contains:
- types: Value types (RoomEntry, NewRoom, DashboardCell, Outcome, ...)
- validation: Validation of new rooms and rename requests
- dashboard: Dashboard synchronisation (insert, relabel, remove rows)
- lifecycle: RoomRegistry with the add/rename/delete operations
- utils: Utility functions (group_adjacent, similarity_score, etc.)
"""
