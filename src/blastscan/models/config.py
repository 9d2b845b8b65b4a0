"""
Pydantic configuration models for blastscan.

Configuration can be loaded from YAML files or built from CLI arguments.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from blastscan.core.constants import DEFAULT_MIN_BITSCORE, DEFAULT_OVERHANG
from blastscan.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ConversionConfig(BaseModel):
    """
    Settings for converting blastn summaries.

    Attributes:
        min_bitscore: HSPs scoring below this are not converted.
        keep: Keep intermediate files (the pretblout) on disk.
        overhang: Nucleotides of overlap between a realigned flank and the
            blastn seed region when planning subsequences.
    """

    min_bitscore: float = Field(
        default=DEFAULT_MIN_BITSCORE,
        ge=0,
        description="Minimum blastn bit score for an HSP to be converted",
    )
    keep: bool = Field(
        default=False,
        description="Leave intermediate files on disk",
    )
    overhang: int = Field(
        default=DEFAULT_OVERHANG,
        ge=1,
        description="Overlap in nt between realigned flanks and the ungapped seed",
    )

    model_config = {"frozen": True}

    @classmethod
    def from_yaml(cls, path: Path) -> ConversionConfig:
        """
        Load configuration from a YAML file.

        Unknown keys are ignored with a warning.

        Raises:
            FileNotFoundError: If the YAML file does not exist.
            ConfigurationError: If the file is not valid YAML or not a mapping.
            ValidationError: If a value is out of range.
        """
        import yaml

        try:
            raw = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise ConfigurationError(
                message=f"Unable to parse config file '{path}': {e}",
                suggestion="Check the YAML syntax of the configuration file.",
            ) from e
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigurationError(
                message=f"YAML config must be a mapping, got {type(raw).__name__}",
                suggestion="Write one key: value pair per setting, e.g. min_bitscore: 50.0",
            )

        known = set(cls.model_fields)
        unknown = sorted(set(raw) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys in %s: %s", path, unknown)
        return cls(**{k: v for k, v in raw.items() if k in known})

    def to_yaml_str(self) -> str:
        import yaml

        return yaml.dump(self.model_dump(), default_flow_style=False, sort_keys=False)

    def to_yaml(self, path: Path) -> None:
        path.write_text(self.to_yaml_str())

    def with_overrides(self, **overrides: Any) -> ConversionConfig:
        """Return a copy with the non-None overrides applied."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        if not updates:
            return self
        return self.model_validate({**self.model_dump(), **updates})
