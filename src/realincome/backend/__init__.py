"""Backend services for the realincome calculator."""
