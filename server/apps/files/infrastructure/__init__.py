"""Infrastructure layer for files app.

This package contains integrations with external systems:
- Local filesystem storage for the upload tree
- Storage layout (bucket and sub-folder resolution)
- Metadata extraction (MIME type, generated names)
- Image re-encoding with Pillow

Keep infrastructure concerns separate from business logic.
"""
