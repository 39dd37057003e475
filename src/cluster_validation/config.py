"""
Configuration management for Cluster Validation.

Loads configuration from environment variables (typically from a .env file).
Uses python-dotenv to load .env automatically.

Usage:
    from cluster_validation.config import config

    cfg = config.pipeline_config()
    cfg = config.pipeline_config(run_permutation_test=True)
"""

import os
from dataclasses import replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .algorithms.pipeline import PipelineConfig

# Look for .env in project root (parent of src/)
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

ENV_PREFIX = "CLUSTER_VALIDATION_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(ENV_PREFIX + name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(ENV_PREFIX + name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got {raw!r}")


class Config:
    """
    Application configuration loaded from environment variables.

    Environment variables can be set:
    1. In a .env file in the project root
    2. In the system environment

    Recognised variables (all optional, prefixed CLUSTER_VALIDATION_):
    N_COMPONENTS, K, MAX_ITER, N_INIT, SEED, LABEL_COLUMN, N_PERMUTATIONS, N_JOBS,
    RUN_PERMUTATION_TEST. LOG_LEVEL is read by setup_logging.
    """

    def __init__(self):
        """Load configuration from environment."""
        defaults = PipelineConfig()
        self.pipeline = PipelineConfig(
            n_components=_env_int("N_COMPONENTS", defaults.n_components),
            k=_env_int("K", defaults.k),
            max_iter=_env_int("MAX_ITER", defaults.max_iter),
            n_init=_env_int("N_INIT", defaults.n_init),
            seed=_env_int("SEED", defaults.seed),
            label_column=_env_int("LABEL_COLUMN", defaults.label_column),
            run_permutation_test=_env_bool(
                "RUN_PERMUTATION_TEST", defaults.run_permutation_test
            ),
            n_permutations=_env_int("N_PERMUTATIONS", defaults.n_permutations),
            n_jobs=_env_int("N_JOBS", defaults.n_jobs),
        )
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

    def pipeline_config(self, **overrides) -> PipelineConfig:
        """
        Get a PipelineConfig from the environment, with explicit overrides.

        Overrides whose value is None are ignored so CLI flags that were not
        given fall through to the environment.
        """
        given = {k: v for k, v in overrides.items() if v is not None}
        return replace(self.pipeline, **given)


# Global config instance
config = Config()
