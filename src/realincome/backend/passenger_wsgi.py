"""WSGI entrypoint for deploying the realincome backend behind Passenger."""

from realincome.backend.app import create_app

# Passenger expects a module-level variable named ``application``.
application = create_app()
