"""Hierarchical YAML configuration using OmegaConf."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from omegaconf import DictConfig, OmegaConf


class RampartConfig:
    """Loads the base YAML and merges any scenario overrides.

    Files in an ``overrides/`` directory next to the base config are merged
    in sorted order, then explicit *extra_files*, then dot-path overrides.
    """

    def __init__(self, config_path: str | Path = "config/default.yaml"):
        self._config_path = Path(config_path)
        self._config: DictConfig | None = None

    @property
    def base_dir(self) -> Path:
        """Directory that relative paths inside the config resolve against."""
        return self._config_path.parent

    def load(
        self,
        validate: bool = False,
        extra_files: list[str | Path] | None = None,
    ) -> DictConfig:
        """Load and merge configuration.

        Args:
            validate: Validate against the Pydantic schema and raise
                ``pydantic.ValidationError`` on invalid values.
            extra_files: Additional YAML files merged last, e.g. a scenario.
        """
        if not self._config_path.exists():
            raise FileNotFoundError(f"Config not found: {self._config_path}")

        base = OmegaConf.load(self._config_path)
        assert isinstance(base, DictConfig)

        override_dir = self.base_dir / "overrides"
        if override_dir.is_dir():
            for yaml_file in sorted(override_dir.glob("*.yaml")):
                base = OmegaConf.merge(base, OmegaConf.load(yaml_file))

        for extra in extra_files or []:
            extra_path = Path(extra)
            if not extra_path.exists():
                raise FileNotFoundError(f"Config not found: {extra_path}")
            base = OmegaConf.merge(base, OmegaConf.load(extra_path))

        if validate or OmegaConf.select(base, "rampart.system.validate_config", default=False):
            from rampart.core.config_schema import validate_config

            validate_config(OmegaConf.to_container(base, resolve=True))

        self._config = base
        return self._config

    def override(self, dotpath: str, value: Any) -> None:
        """Override a value using dot notation.

        Example: config.override("rampart.batch.rounds", 1000)
        """
        if self._config is None:
            raise RuntimeError("Config not loaded yet. Call load() first.")
        OmegaConf.update(self._config, dotpath, value)

    @property
    def cfg(self) -> DictConfig:
        if self._config is None:
            raise RuntimeError("Config not loaded yet. Call load() first.")
        return self._config
