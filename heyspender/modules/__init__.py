"""Feature modules: one package per domain (models, repository protocol, service)."""
