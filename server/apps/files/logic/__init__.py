"""Business logic layer for files app.

This package contains all business logic for file operations:
- Upload validation (type allow-list, size ceiling)
- Metadata record persistence
- Upload, download, view and delete orchestration

All business logic should be implemented here, separate from
models (data layer), infrastructure (external systems) and views.
"""
