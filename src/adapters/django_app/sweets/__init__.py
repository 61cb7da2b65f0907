"""App Django do catálogo de doces (models, repositório, API JSON)."""
