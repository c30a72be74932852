"""Инфраструктура: внешние провайдеры."""
