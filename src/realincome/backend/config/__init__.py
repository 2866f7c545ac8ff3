"""Rate schedule configuration models and loaders."""
