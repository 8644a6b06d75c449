import copy
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from omegaconf import OmegaConf
from omegaconf.errors import InterpolationResolutionError

from gridrunner.constants import CONFIG_ENV_VAR, DEFAULT_CONCURRENCY, DEFAULT_CONFIG_FILE
from gridrunner.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridConfig:
    """Immutable settings of one grid run.

    Attributes
    ----------
    remote : dict[str, Any]
        Remote session settings forwarded to every scenario
    browsers : tuple[dict[str, Any], ...]
        Browser capability descriptors, one browser runner each
    concurrency : int
        Maximum simultaneous scenarios within one browser

    Raises
    ------
    ConfigurationError
        If any value is invalid, including when the instance is built directly
    """

    remote: dict[str, Any] = field(default_factory=dict)
    browsers: tuple[dict[str, Any], ...] = ()
    concurrency: int = DEFAULT_CONCURRENCY

    def __post_init__(self) -> None:
        validate_grid_values(
            {
                "remote": self.remote,
                "browsers": self.browsers,
                "concurrency": self.concurrency,
            }
        )

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any] | None) -> "GridConfig":
        """Build a validated GridConfig from a plain mapping.

        Missing or None values fall back to their defaults.

        Parameters
        ----------
        config : Mapping[str, Any] | None
            Mapping with optional ``remote``, ``browsers`` and ``concurrency`` keys

        Returns
        -------
        GridConfig
            Validated configuration holding deep copies of the inputs

        Raises
        ------
        ConfigurationError
            If any value has the wrong type or concurrency is not positive
        """
        config = config or {}

        if not isinstance(config, Mapping):
            raise ConfigurationError(
                f"grid configuration must be a mapping, got {type(config).__name__}"
            )

        remote = config.get("remote")
        browsers = config.get("browsers")
        concurrency = config.get("concurrency")

        values = {
            "remote": {} if remote is None else remote,
            "browsers": [] if browsers is None else browsers,
            "concurrency": DEFAULT_CONCURRENCY if concurrency is None else concurrency,
        }
        validate_grid_values(values)

        return cls(
            remote=copy.deepcopy(dict(values["remote"])),
            browsers=tuple(copy.deepcopy(dict(b)) for b in values["browsers"]),
            concurrency=values["concurrency"],
        )


def validate_grid_values(config: Mapping[str, Any]) -> None:
    """Validate the grid keys of a configuration mapping.

    Parameters
    ----------
    config : Mapping[str, Any]
        Configuration to validate

    Raises
    ------
    ConfigurationError
        If remote, browsers or concurrency are invalid
    """
    remote = config.get("remote", {})
    if not isinstance(remote, Mapping):
        raise ConfigurationError("remote must be a mapping of connection settings")

    browsers = config.get("browsers", [])
    if isinstance(browsers, (str, bytes, Mapping)) or not isinstance(
        browsers, (list, tuple)
    ):
        raise ConfigurationError("browsers must be a list of capability mappings")

    for index, browser in enumerate(browsers):
        if not isinstance(browser, Mapping):
            raise ConfigurationError(
                f"browsers[{index}] must be a mapping, got {type(browser).__name__}"
            )

    concurrency = config.get("concurrency", DEFAULT_CONCURRENCY)
    if isinstance(concurrency, bool) or not isinstance(concurrency, int):
        raise ConfigurationError("concurrency must be an integer")

    if concurrency < 1:
        raise ConfigurationError(
            f"concurrency must be a positive integer, got {concurrency}"
        )


class ConfigLoader:
    """Read the grid YAML file and merge its ``defaults`` and ``profiles``.

    The file holds a ``defaults`` section and an optional ``profiles``
    mapping; both carry the grid keys ``remote``, ``browsers`` and
    ``concurrency``. A top-level ``vars`` section supplies values for
    ``${...}`` interpolation.
    """

    def __init__(self) -> None:
        self.BUILT_IN_DEFAULTS = {
            "remote": {},
            "browsers": [],
            "concurrency": DEFAULT_CONCURRENCY,
        }

    def load_config(self, config_path: str | None = None) -> dict[str, Any]:
        """Read the grid configuration file and resolve its interpolations.

        Parameters
        ----------
        config_path : str | None
            Path of the grid file. If None, the GRIDRUNNER_CONFIG environment
            variable is used, then ``gridrunner.yaml`` in the working directory

        Returns
        -------
        dict[str, Any]
            Top-level mapping with ``defaults`` and optional ``profiles``,
            ``vars`` entries resolved. A missing or empty file yields
            ``{"defaults": {}}`` so built-in grid defaults apply

        Raises
        ------
        omegaconf.errors.InterpolationResolutionError
            If a ``${...}`` reference names an undefined or circular variable
        ValueError
            If the file is not valid YAML
        ConfigurationError
            If the top level of the file is not a mapping
        RuntimeError
            If the file exists but cannot be read
        """
        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE)

        config_file = Path(config_path)

        if not config_file.exists():
            logger.debug("Config file %s not found, using built-in defaults", config_file)
            return {"defaults": {}}

        try:
            cfg = OmegaConf.load(config_file)
        except yaml.YAMLError as e:
            logger.error("Failed to parse YAML config file %s: %s", config_file, e)
            raise ValueError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            logger.error("Failed to read config file %s: %s", config_file, e)
            raise RuntimeError(f"Failed to read config file {config_file}: {e}") from e

        if cfg is None:
            return {"defaults": {}}

        if "vars" in cfg:
            vars_dict = OmegaConf.to_container(cfg.vars, resolve=False)
            for key, value in vars_dict.items():
                if key not in cfg:
                    cfg[key] = value

        try:
            config = OmegaConf.to_container(cfg, resolve=True, throw_on_missing=True)
        except InterpolationResolutionError as e:
            logger.error("Failed to resolve configuration variables: %s", e)
            raise
        except (ValueError, KeyError, AttributeError) as e:
            logger.error("Failed to resolve configuration variables: %s", e)
            raise ValueError(f"Configuration variable resolution error: {e}") from e

        if not isinstance(config, dict):
            raise ConfigurationError(f"Top level of {config_file} must be a mapping")

        if not config:
            return {"defaults": {}}

        return config

    def get_grid_config(
        self, config: dict[str, Any], profile: str | None = None
    ) -> dict[str, Any]:
        """Build the grid settings of one profile.

        Later layers replace whole keys of earlier ones: built-in defaults
        (no remote settings, no browsers, concurrency 2), then the file's
        ``defaults`` section, then ``profiles[profile]``. A profile listing
        ``browsers`` therefore replaces the default browser list.

        Parameters
        ----------
        config : dict[str, Any]
            Mapping returned by ``load_config``
        profile : str | None
            Entry of ``profiles`` to apply, or None for the defaults only

        Returns
        -------
        dict[str, Any]
            Mapping with ``remote``, ``browsers`` and ``concurrency`` ready for
            ``validate_config`` and ``GridConfig.from_mapping``

        Raises
        ------
        ConfigurationError
            If ``profile`` is not an entry of ``profiles``
        """
        merged = copy.deepcopy(self.BUILT_IN_DEFAULTS)

        yaml_defaults = config.get("defaults") or {}
        for key, value in yaml_defaults.items():
            merged[key] = value

        if profile is not None:
            profiles = config.get("profiles") or {}

            if profile not in profiles:
                available = list(profiles.keys())

                if not available:
                    raise ConfigurationError(
                        f"Unknown profile '{profile}': the grid file defines no profiles"
                    )

                raise ConfigurationError(
                    f"Unknown profile '{profile}'. Available profiles: {available}"
                )

            for key, value in (profiles[profile] or {}).items():
                merged[key] = value

        return merged

    def validate_config(self, config: dict[str, Any]) -> None:
        """Check the merged grid settings before a run.

        Parameters
        ----------
        config : dict[str, Any]
            Configuration to validate

        Raises
        ------
        ConfigurationError
            If remote, browsers or concurrency are invalid
        """
        validate_grid_values(config)

        unknown = sorted(set(config) - set(self.BUILT_IN_DEFAULTS))
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))
