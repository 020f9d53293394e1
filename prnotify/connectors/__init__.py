"""Connector interfaces and implementations."""

from .github_gh import GithubGhSourceConnector
from .ntfy import NtfySinkConnector

__all__ = ["GithubGhSourceConnector", "NtfySinkConnector"]
