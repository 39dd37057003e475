"""Utility modules for Cluster Validation."""

from .logging_config import get_logger, setup_logging
from .votes_loader import load_vote_table

__all__ = [
    "get_logger",
    "setup_logging",
    "load_vote_table",
]
