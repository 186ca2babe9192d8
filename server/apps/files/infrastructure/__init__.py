"""Infrastructure layer for files app.

This package contains integrations with external systems:
- S3-compatible object storage (django-storages / boto3)
- Filename generation, sanitizing and header encoding

Keep infrastructure concerns separate from business logic.
"""
