"""Pydantic models for job documents and API payloads."""
