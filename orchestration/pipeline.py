# orchestration/pipeline.py
from pathlib import Path
from typing import List, Dict, Any, Optional, Union, Callable, Iterable, Tuple
import logging
import time
from dataclasses import dataclass, field

from config import Config
from database.connection import Neo4jConnection
from database.instance_graph import InstanceGraph, load_graph_file
from services.validation import GraphValidator, Violation
from utils.error_handler import GraphError, handle_errors

logger = logging.getLogger(__name__)

GraphSource = Tuple[str, Callable[[], InstanceGraph]]

@dataclass
class GraphValidationResult:
    """Container for the validation outcome of one graph."""
    name: str
    valid: bool
    error: Optional[str] = None
    error_code: Optional[str] = None
    violations: List[Violation] = field(default_factory=list)
    nodes_checked: int = 0
    validation_time: float = 0.0

class ValidationPipeline:
    """Validates a batch of graphs against a single compiled schema."""

    def __init__(self, config: Config, validator: Optional[GraphValidator] = None):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

        self.logger.info("Initialising validator")
        self.validator = validator or GraphValidator.from_config(config)

    def validate_files(self, paths: Iterable[Union[str, Path]]) -> Dict[str, GraphValidationResult]:
        """Validate graph documents stored as YAML or JSON files."""
        sources = [(str(path), lambda path=path: load_graph_file(path)) for path in paths]
        return self.validate_sources(sources)

    def validate_neo4j(self) -> Dict[str, GraphValidationResult]:
        """Validate the graph held in the configured Neo4j database."""
        uri = self.config.neo4j_config.get('uri', 'neo4j')

        def read_graph() -> InstanceGraph:
            with Neo4jConnection(self.config) as connection:
                return InstanceGraph.from_neo4j(connection, name=uri)

        return self.validate_sources([(uri, read_graph)])

    def validate_sources(self, sources: Iterable[GraphSource]) -> Dict[str, GraphValidationResult]:
        results: Dict[str, GraphValidationResult] = {}
        for name, load in sources:
            results[name] = self._validate_single(name, load)
        return results

    def _validate_single(self, name: str, load: Callable[[], InstanceGraph]) -> GraphValidationResult:
        start_time = time.time()

        try:
            graph = self._load(load)
        except GraphError as e:
            self.logger.error(f"Unable to validate graph {name}, an exception occurred: {str(e)}")
            return GraphValidationResult(name=name, valid=False, error=str(e), error_code=e.error_code)

        self.logger.info(f"Validating graph {name}")
        report = self.validator.check(graph)

        if report.valid:
            self.logger.info(f"Graph {name} was successfully validated")
        else:
            self.logger.warning(f"Graph {name} was not valid")

        return GraphValidationResult(
            name=name,
            valid=report.valid,
            violations=report.violations,
            nodes_checked=report.nodes_checked,
            validation_time=time.time() - start_time
        )

    @staticmethod
    @handle_errors(logger=logger)
    def _load(load: Callable[[], InstanceGraph]) -> InstanceGraph:
        return load()

    def close(self):
        self.validator.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

def prepare_validation_summary(results: Dict[str, GraphValidationResult]) -> Dict[str, Any]:
    """Prepare summary of validation results."""
    return {
        'total_graphs': len(results),
        'valid': sum(1 for r in results.values() if r.valid),
        'invalid': sum(1 for r in results.values() if not r.valid and r.error is None),
        'errors': sum(1 for r in results.values() if r.error is not None),
        'total_validation_time': sum(r.validation_time for r in results.values()),
        'graphs': {
            name: {
                'valid': result.valid,
                'error': result.error,
                'error_code': result.error_code,
                'nodes_checked': result.nodes_checked,
                'validation_time': result.validation_time,
                'violations': [
                    {
                        'node_id': str(v.node_id),
                        'node_label': v.node_label,
                        'error_code': v.error_code.value,
                        'message': v.message
                    }
                    for v in result.violations
                ]
            }
            for name, result in results.items()
        }
    }
