"""Pydantic models for the wire format of error responses."""
