"""Django project for the portal notification engine."""
