"""Services for the notifications app."""

# Service singletons are imported from their modules directly
# (e.g. notifications.services.dispatcher) to keep app loading free of
# import cycles between channels and services.
