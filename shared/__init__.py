"""Shared building blocks used across the domain apps."""
