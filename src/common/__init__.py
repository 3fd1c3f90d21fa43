"""Shared HTTP, logging and filesystem helpers."""
