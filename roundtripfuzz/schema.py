"""Run configuration files: schema validation and loading into FuzzConfig."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from jsonschema import Draft7Validator, ValidationError

from .config import EmptyMapPolicy, FuzzConfig

SCHEMA_PATH = Path(__file__).parent / 'roundtripfuzz-schema.json'

_TOP_LEVEL_KEYS = ('iterations', 'input_size', 'seed', 'codecs')
_GENERATION_KEYS = ('max_collection_len', 'max_string_len', 'max_depth')


class SchemaValidator:
    """Loads run configurations checked against the bundled schema"""

    def __init__(self, schema_path: Path = SCHEMA_PATH):
        with open(schema_path, 'r') as f:
            self._validator = Draft7Validator(json.load(f))

    def validate(self, config_path: Path) -> Dict[str, Any]:
        """Read a configuration file and return its validated contents"""
        with open(config_path, 'r') as f:
            data = json.load(f)
        self.check(data)
        return data

    def check(self, data: Dict[str, Any]) -> None:
        try:
            self._validator.validate(data)
        except ValidationError as e:
            where = '.'.join(str(p) for p in e.absolute_path) or 'configuration'
            raise ValueError(f"Invalid configuration at {where}: {e.message}") from e

    def load(self, config_path: Path, config: Optional[FuzzConfig] = None) -> FuzzConfig:
        """Validate ``config_path`` and overlay it onto ``config`` (or defaults)."""
        return apply_config(self.validate(config_path), config or FuzzConfig())


def apply_config(data: Dict[str, Any], config: FuzzConfig) -> FuzzConfig:
    """Overlay validated configuration values onto ``config``."""
    for key in _TOP_LEVEL_KEYS:
        if key in data:
            setattr(config, key, data[key])

    generation = data.get('generation', {})
    for key in _GENERATION_KEYS:
        if key in generation:
            setattr(config, key, generation[key])
    if 'empty_maps' in generation:
        config.empty_maps = EmptyMapPolicy(generation['empty_maps'])
    if 'customizers' in data:
        config.customizers_file = Path(data['customizers'])
    return config
