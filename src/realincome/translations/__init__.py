"""Shared translation catalogues consumed by the backend and front-end."""
