"""Pydantic schemas for the notifications app."""
