"""Application package for the academic records backend.

This package exposes the model, repository and service modules used by
the FastAPI application in `main`. Individual modules contain the
concrete implementations and documentation.
"""
