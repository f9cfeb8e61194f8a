"""Data models for the Health Diary API."""
