"""Clients for the wrapped HTTP services."""

from docscope.clients.github import GitHubClient
from docscope.clients.openapi import SpecLoader, parse_spec_text

__all__ = ["GitHubClient", "SpecLoader", "parse_spec_text"]
