"""Clients for services the notification engine depends on."""
