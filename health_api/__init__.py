"""FastAPI service for the Health Diary.

This package provides REST API endpoints for registering users, recording
symptoms and medication intake, and reading per-user statistics.
"""

__version__ = "1.0.0"
