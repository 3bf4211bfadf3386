#!/usr/bin/env python3
"""
Conversion options and YAML configuration files.

A config file sets defaults for the `convert` command:

```yaml
minify: false
expand_for_display: true
flag_unreviewed: true
encoding: utf-8
output_suffix: .json
```
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

try:
    import yaml
    YAML_AVAILABLE = True
except ImportError:
    YAML_AVAILABLE = False

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_NAME = ".po2json.yaml"


@dataclass
class ConversionOptions:
    """Options for one file conversion."""
    minify: bool = False
    expand_for_display: bool = False
    flag_unreviewed: bool = False
    encoding: str = "utf-8"
    output_suffix: str = ".json"

    @classmethod
    def from_dict(cls, data: dict) -> "ConversionOptions":
        """Create from dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}. Allowed: {', '.join(sorted(known))}")

        for name in ("minify", "expand_for_display", "flag_unreviewed"):
            if name in data and not isinstance(data[name], bool):
                raise ValueError(f"Config key '{name}' must be true or false")
        return cls(**data)

    def merge_flags(
        self,
        minify: bool = False,
        expand_for_display: bool = False,
        flag_unreviewed: bool = False,
    ) -> "ConversionOptions":
        """Return a copy with the given command-line flags switched on."""
        return ConversionOptions(
            minify=self.minify or minify,
            expand_for_display=self.expand_for_display or expand_for_display,
            flag_unreviewed=self.flag_unreviewed or flag_unreviewed,
            encoding=self.encoding,
            output_suffix=self.output_suffix,
        )


def load_config(path: str) -> ConversionOptions:
    """
    Load conversion options from a YAML file.

    Raises:
        ImportError: If PyYAML is not installed
        ValueError: If the file is not a mapping of known options
    """
    if not YAML_AVAILABLE:
        raise ImportError("PyYAML is required for config files. Install with: pip install pyyaml")

    config_path = Path(path)
    logger.info("Reading config from %s", config_path)
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}")

    if data is None:
        return ConversionOptions()
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping: {config_path}")

    return ConversionOptions.from_dict(data)


def find_config(input_file: str, explicit: Optional[str] = None) -> ConversionOptions:
    """
    Resolve options for an input file.

    An explicit config path wins; otherwise `.po2json.yaml` next to the input
    is used when present.
    """
    if explicit:
        return load_config(explicit)

    candidate = Path(input_file).parent / DEFAULT_CONFIG_NAME
    if candidate.is_file():
        return load_config(str(candidate))

    return ConversionOptions()
