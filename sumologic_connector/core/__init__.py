"""Core connector logic: API client, resource mapping and synchronization."""
