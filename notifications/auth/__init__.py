"""Authentication for the notifications API."""
