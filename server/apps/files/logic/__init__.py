"""Business logic layer for files app.

This package contains all business logic for uploaded files:
- Ingesting multipart uploads and normalizing form payloads
- Explicit deletion of uploaded files
- Reclaiming files no content record references

All business logic should be implemented here, separate from
views (HTTP layer) and infrastructure (external systems).
"""
