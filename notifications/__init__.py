"""Notification dispatch and preference engine for the client portal."""
