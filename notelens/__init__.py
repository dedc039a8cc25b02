"""
notelens.

- backend/: API, owner-scoped entity store, AI analysis, configuration
- client/: Async HTTP client mirroring the backend API
"""

__version__ = "0.1.0"
