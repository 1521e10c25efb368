"""
GitHub Integration Layer

This module provides GitHub App authentication, REST API access,
PR diff collection and review comment publication.
"""

from .auth import GitHubAppAuth
from .client import GitHubClient
from .collector import DiffCollector
from .publisher import Publisher

__all__ = ['GitHubAppAuth', 'GitHubClient', 'DiffCollector', 'Publisher']
