"""
Global configuration for the indexed Merkle tree package.

This module contains environment-specific settings that apply across all subspecs.
"""

import os

_SUPPORTED_IMT_ENVS: list[str] = ["prod", "test"]

IMT_ENV = os.environ.get("IMT_ENV", "prod").lower()
"""
The environment flag ('prod' or 'test'). Defaults to 'prod'.

In 'prod' trees hash with Poseidon2 over KoalaBear.
In 'test' trees hash with SHA-256, which is orders of magnitude faster in Python.
"""

if IMT_ENV not in _SUPPORTED_IMT_ENVS:
    raise ValueError(
        f"Invalid IMT_ENV environment variable: '{IMT_ENV}'. "
        f"Supported values: {_SUPPORTED_IMT_ENVS}"
    )
