"""
Backend package for the WaterTrack API.

This package provides a FastAPI application for logging household water
usage, computing usage statistics, and tracking progress through water
conservation lessons. Storage is abstracted behind a small client protocol so
the service runs against an in-memory store during development and tests, or
against any SQLAlchemy URL in production.
"""
