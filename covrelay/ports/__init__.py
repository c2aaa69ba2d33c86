"""
Port interfaces for the covrelay system.

This module contains the interface definitions using Python Protocols
to define contracts between the application layer and adapters.
"""

from .coverage_port import CoverageLoaderPort
from .resolver_port import ResolverFactory, SourceResolver
from .upload_port import UploadPort
from .vcs_port import VcsPort

__all__ = [
    "CoverageLoaderPort",
    "ResolverFactory",
    "SourceResolver",
    "UploadPort",
    "VcsPort",
]
