"""
Workshop API package.

This package provides a FastAPI application for attendee registration,
speaker and session listings, and a password-gated admin dashboard backed
by Firestore (or an in-memory store for local runs and tests).
"""
