"""Publicação de eventos de domínio e handlers Celery."""
