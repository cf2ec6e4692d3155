"""Storage and archive layer.

This module persists canonical school records through a table store
collaborator and resolves read-only school-year archive snapshots.
"""
