"""Adapters Django: persistência, Unit of Work, eventos e API JSON."""
