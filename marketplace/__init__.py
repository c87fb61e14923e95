"""Freelance marketplace backend: profiles, contracts, job payments and deposits."""

__version__ = "1.0.0"
