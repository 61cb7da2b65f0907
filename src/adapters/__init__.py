"""Adapters (driven e driving) da arquitetura hexagonal."""
