# services/validation.py
from typing import List, Dict, Any, Optional, Iterable, Iterator, Union
import logging
from dataclasses import dataclass, field
from enum import Enum
import networkx as nx

from config import Config
from database.instance_graph import InstanceGraph, InstanceNode
from database.schema_graph import SchemaGraph
from services.schema_compiler import SchemaCompiler
from utils.error_handler import UnknownClassError
from validation.datatypes import infer_datatype
from vocabulary.loader import VocabularyLoader, SchemaSource

class ErrorCode(Enum):
    """Ways in which a node can fail to conform to the schema."""
    UNKNOWN_CLASS = "unknown_class"
    UNDECLARED_PROPERTY = "undeclared_property"
    INVALID_EDGE = "invalid_edge"

@dataclass
class Violation:
    """A single way in which a node does not conform to the schema."""
    node_id: Any
    node_label: Optional[str]
    error_code: ErrorCode
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

@dataclass
class ValidationReport:
    """Outcome of checking one graph."""
    graph_name: str
    violations: List[Violation] = field(default_factory=list)
    nodes_checked: int = 0

    @property
    def valid(self) -> bool:
        return not self.violations

GraphLike = Union[InstanceGraph, nx.DiGraph]

class GraphValidator:
    """
    Validates the structure of labelled property graphs against a vocabulary.

    The bundled Schema.org vocabularies, plus any additional streams, are
    compiled into a schema graph once, when the validator is created.
    """

    def __init__(self, include_superseded: bool = False, *additional_streams: SchemaSource,
                 fail_fast: bool = True, include_builtin: bool = True,
                 loader: Optional[VocabularyLoader] = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.include_superseded = include_superseded
        self.fail_fast = fail_fast

        loader = loader or VocabularyLoader()
        records = loader.load(additional_streams, include_builtin=include_builtin)
        self.schema: SchemaGraph = SchemaCompiler(include_superseded).compile(records)

    @classmethod
    def from_config(cls, config: Config, extra_schemas: Iterable[SchemaSource] = (),
                    include_superseded: Optional[bool] = None,
                    fail_fast: Optional[bool] = None) -> 'GraphValidator':
        """Create a validator from configuration; explicit arguments take precedence."""
        schemas = list(config.additional_schemas) + list(extra_schemas)
        return cls(
            config.include_superseded if include_superseded is None else include_superseded,
            *schemas,
            fail_fast=config.fail_fast if fail_fast is None else fail_fast,
            include_builtin=config.include_builtin
        )

    def validate(self, graph: GraphLike) -> bool:
        """
        Validate the structure of a graph against the schema.
        Returns True if the graph is valid, and False otherwise.
        """
        return self.check(graph).valid

    def check(self, graph: GraphLike) -> ValidationReport:
        """Validate a graph, stopping at the first violation unless fail_fast is off."""
        return self._check(graph, stop_at_first=self.fail_fast)

    def collect_violations(self, graph: GraphLike) -> ValidationReport:
        """Validate every node of a graph and report all violations found."""
        return self._check(graph, stop_at_first=False)

    def is_valid(self, graph: GraphLike, node: InstanceNode) -> bool:
        instance = InstanceGraph.wrap(graph)
        return next(self._node_violations(instance, node), None) is None

    def _check(self, graph: GraphLike, stop_at_first: bool) -> ValidationReport:
        instance = InstanceGraph.wrap(graph)
        report = ValidationReport(instance.name)

        for node in instance.nodes():
            report.nodes_checked += 1
            for violation in self._node_violations(instance, node):
                self.logger.info(violation.message)
                report.violations.append(violation)

                # Return as soon as we find an invalid node, rather than continuing
                if stop_at_first:
                    return report

        return report

    def _node_violations(self, graph: InstanceGraph, node: InstanceNode) -> Iterator[Violation]:
        try:
            class_id = self.schema.class_by_label(node.label)
        except UnknownClassError as e:
            yield Violation(
                node.node_id, node.label, ErrorCode.UNKNOWN_CLASS,
                f"Could not find vertex {node.label} in the schema",
                e.details
            )
            return

        for name, value in node.properties.items():
            if value is None:
                continue

            datatype = infer_datatype(value)
            if not self.schema.has_property(class_id, name, datatype.value):
                yield Violation(
                    node.node_id, node.label, ErrorCode.UNDECLARED_PROPERTY,
                    f"Could not find property {name} on vertex {node.label} "
                    f"with a target of {datatype} in the schema",
                    {'property': name, 'datatype': datatype.value}
                )

        # Only outgoing edges; incoming edges are checked from their source node
        for edge in graph.out_edges(node):
            target_label = edge.target.label
            if not self.schema.has_property(class_id, edge.label, target_label):
                yield Violation(
                    node.node_id, node.label, ErrorCode.INVALID_EDGE,
                    f"Could not find edge {edge.label} on vertex {node.label} "
                    f"with a target of {target_label} in the schema",
                    {'edge': edge.label, 'target': target_label}
                )

    def close(self):
        self.schema.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
