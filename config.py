# config.py
from pathlib import Path
import logging
from typing import Dict, Any, List, Optional, Union
import yaml

from utils.error_handler import ConfigurationError

class Config:
    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path = Path(config_path) if config_path is not None else None
        self.config: Dict[str, Any] = self._load_config()

        # Schema configurations
        schema_config = self._section('schema')
        self.include_superseded: bool = bool(schema_config.get('include_superseded', False))
        self.additional_schemas: List[str] = [str(p) for p in schema_config.get('additional_schemas') or []]
        self.include_builtin: bool = bool(schema_config.get('builtin', True))

        # Validation configurations
        self.fail_fast: bool = bool(self._section('validation').get('fail_fast', True))

        # Neo4j configurations (if needed)
        self.neo4j_config = self._section('neo4j')

        # Setup logging
        self._setup_logging()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if self.config_path is None:
            return {}

        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found at {self.config_path}")

        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f)

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Config file {self.config_path} must contain a mapping",
                'invalid_config',
                {'path': str(self.config_path)}
            )
        return config

    def _section(self, name: str) -> Dict[str, Any]:
        section = self.config.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigurationError(
                f"Config section '{name}' must be a mapping",
                'invalid_config',
                {'section': name}
            )
        return section

    def _setup_logging(self):
        """Setup logging configuration based on YAML content."""
        log_config = self._section('logging')
        logging.basicConfig(
            level=log_config.get('level', 'INFO'),
            format=log_config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
            filename=log_config.get('file')
        )
