"""Infraestrutura compartilhada pelos apps Django."""
