"""Clients for the external Feed, Translation and Speech services."""
