"""Settings loaded from hpdec.toml.

Resolution order: the HPDEC_CONFIG environment variable, an explicit path,
then ``hpdec.toml`` in the working directory and ``~/hpdec.toml``. With no
file found the defaults below apply.

Example hpdec.toml:

    [limits]
    max_pixels = 268435456

    [blur]
    sample_stride = 10

    [process]
    modified_path = "HPDEC/bars_modified.hpdec"
    perturb_count = 5
    red_delta = 50
"""

from __future__ import annotations

import logging
import os
from typing import Any, cast

from pydantic import BaseModel, Field, ValidationError

# TOML loading for Python 3.11+ and older
try:
    import tomllib  # type: ignore[import-not-found, unused-ignore]
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found, no-redef, unused-ignore]

from hpdec_ecs.core.buffer import DEFAULT_MAX_PIXELS

logger = logging.getLogger(__name__)

CONFIG_ENV = "HPDEC_CONFIG"
CONFIG_NAME = "hpdec.toml"


class Limits(BaseModel):
    max_pixels: int = Field(default=DEFAULT_MAX_PIXELS, gt=0)


class BlurSettings(BaseModel):
    sample_stride: int = Field(default=10, ge=1)


class ProcessSettings(BaseModel):
    """Settings of the reference processing pipeline.

    Attributes:
        modified_path: Where the perturbed copy of the input is saved
        perturb_count: Number of leading pixels whose red channel is shifted
        red_delta: Amount added to the red channel (modulo 255)
    """

    modified_path: str = "HPDEC/bars_modified.hpdec"
    perturb_count: int = Field(default=5, ge=0)
    red_delta: int = 50


class Settings(BaseModel):
    limits: Limits = Field(default_factory=Limits)
    blur: BlurSettings = Field(default_factory=BlurSettings)
    process: ProcessSettings = Field(default_factory=ProcessSettings)


def _resolve_config_path(config_path: str | None) -> str | None:
    """Resolve configuration path from env, explicit path, or defaults."""
    env_config = os.environ.get(CONFIG_ENV)
    if env_config:
        return env_config
    if config_path:
        return config_path
    candidates = [
        CONFIG_NAME,
        os.path.expanduser(f"~/{CONFIG_NAME}"),
    ]
    for candidate in candidates:
        if os.path.exists(candidate):
            return candidate
    return None


def load_settings(config_path: str | os.PathLike[str] | None = None) -> Settings:
    """Load settings, falling back to defaults when no file is found.

    Args:
        config_path: Path to hpdec.toml (auto-detected if None)

    Raises:
        FileNotFoundError: If HPDEC_CONFIG or config_path names a missing file
        ValueError: If the file is not valid TOML or holds invalid values
    """
    resolved_path = _resolve_config_path(
        os.fspath(config_path) if config_path is not None else None
    )
    if resolved_path is None:
        return Settings()
    if not os.path.exists(resolved_path):
        raise FileNotFoundError(
            f"Config file not found at {resolved_path}. Set {CONFIG_ENV} or create {CONFIG_NAME}"
        )

    with open(resolved_path, "rb") as f:
        try:
            config = cast(dict[str, Any], tomllib.load(f))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Failed to parse {resolved_path}: {e}") from e

    try:
        settings = Settings.model_validate(config)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {resolved_path}: {e}") from e

    logger.debug("Loaded settings from %s", resolved_path)
    return settings
