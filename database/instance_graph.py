# database/instance_graph.py
from pathlib import Path
from typing import Dict, Any, Iterator, Optional, Union
from dataclasses import dataclass, field
import json
import logging
import networkx as nx
import yaml

from utils.error_handler import GraphSourceError

logger = logging.getLogger(__name__)

LABEL_ATTRIBUTE = 'label'

@dataclass
class InstanceNode:
    """A node of the graph being validated."""
    node_id: Any
    label: Optional[str]
    properties: Dict[str, Any] = field(default_factory=dict)

@dataclass
class InstanceEdge:
    """A directed, labelled edge of the graph being validated."""
    label: str
    source: InstanceNode
    target: InstanceNode

class InstanceGraph:
    """
    Read-only view of a labelled property graph.

    Backed by a networkx directed graph whose nodes carry a ``label`` attribute
    (all other node attributes are properties) and whose edges carry a
    ``label`` attribute.
    """

    def __init__(self, graph: Optional[nx.DiGraph] = None, name: str = 'graph'):
        self.graph = graph if graph is not None else nx.MultiDiGraph()
        self.name = name

    def add_node(self, node_id: Any, label: str, properties: Optional[Dict[str, Any]] = None) -> Any:
        properties = properties or {}
        if LABEL_ATTRIBUTE in properties:
            raise GraphSourceError(
                f"Node {node_id} has a property named {LABEL_ATTRIBUTE}, which is reserved for the node label",
                'graph_format',
                {'node': node_id}
            )
        self.graph.add_node(node_id, **{LABEL_ATTRIBUTE: label})
        self.graph.nodes[node_id].update(properties)
        return node_id

    def add_edge(self, source_id: Any, target_id: Any, label: str):
        self.graph.add_edge(source_id, target_id, **{LABEL_ATTRIBUTE: label})

    def node(self, node_id: Any) -> InstanceNode:
        data = self.graph.nodes[node_id]
        properties = {k: v for k, v in data.items() if k != LABEL_ATTRIBUTE}
        return InstanceNode(node_id, data.get(LABEL_ATTRIBUTE), properties)

    def nodes(self) -> Iterator[InstanceNode]:
        for node_id in self.graph.nodes:
            yield self.node(node_id)

    def out_edges(self, node: InstanceNode) -> Iterator[InstanceEdge]:
        for _, target_id, data in self.graph.out_edges(node.node_id, data=True):
            yield InstanceEdge(data.get(LABEL_ATTRIBUTE), node, self.node(target_id))

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def __repr__(self) -> str:
        return (f"InstanceGraph(name={self.name}, nodes={self.graph.number_of_nodes()}, "
                f"edges={self.graph.number_of_edges()})")

    @classmethod
    def wrap(cls, graph: Union['InstanceGraph', nx.DiGraph]) -> 'InstanceGraph':
        """Accept either an InstanceGraph or a bare networkx graph."""
        if isinstance(graph, InstanceGraph):
            return graph
        if isinstance(graph, nx.DiGraph):
            return cls(graph)
        raise TypeError(f"Cannot validate object of type {type(graph).__name__}")

    @classmethod
    def from_document(cls, document: Dict[str, Any], name: str = 'graph') -> 'InstanceGraph':
        """
        Build a graph from a mapping of the form
        {"nodes": [{"id", "label", "properties"}], "edges": [{"source", "target", "label"}]}.
        Property values are taken as they are; a time of day parsed from YAML
        must have been quoted to arrive as a string (see load_graph_file).
        """
        if not isinstance(document, dict):
            raise GraphSourceError(
                f"Graph document {name} must be a mapping",
                'graph_format',
                {'graph': name}
            )

        instance = cls(name=name)
        for node in document.get('nodes') or []:
            if not isinstance(node, dict) or 'id' not in node or 'label' not in node:
                raise GraphSourceError(
                    f"Node in graph {name} is missing an id or label",
                    'graph_format',
                    {'graph': name, 'node': node}
                )
            instance.add_node(node['id'], node['label'], node.get('properties'))

        for edge in document.get('edges') or []:
            if not isinstance(edge, dict):
                raise GraphSourceError(
                    f"Edge in graph {name} must be a mapping",
                    'graph_format',
                    {'graph': name, 'edge': edge}
                )
            missing = [k for k in ('source', 'target', 'label') if k not in edge]
            if missing:
                raise GraphSourceError(
                    f"Edge in graph {name} is missing {', '.join(missing)}",
                    'graph_format',
                    {'graph': name, 'edge': edge}
                )
            for endpoint in (edge['source'], edge['target']):
                if endpoint not in instance.graph:
                    raise GraphSourceError(
                        f"Edge in graph {name} refers to unknown node {endpoint}",
                        'graph_format',
                        {'graph': name, 'edge': edge}
                    )
            instance.add_edge(edge['source'], edge['target'], edge['label'])

        return instance

    @classmethod
    def from_neo4j(cls, connection, name: str = 'neo4j') -> 'InstanceGraph':
        """Read every node and relationship of a Neo4j database."""
        instance = cls(name=name)

        for record in connection.fetch_nodes():
            labels = record['labels']
            if len(labels) > 1:
                logger.warning(
                    f"Node {record['id']} has several labels {labels}; only {labels[0]} will be validated"
                )
            properties = {k: _native(v) for k, v in record['properties'].items()}
            instance.add_node(record['id'], labels[0] if labels else None, properties)

        for record in connection.fetch_relationships():
            instance.add_edge(record['source'], record['target'], record['rel_type'])

        logger.info(f"Read {instance!r} from Neo4j")
        return instance

def _native(value: Any) -> Any:
    # neo4j temporal values convert to datetime/date/time
    to_native = getattr(value, 'to_native', None)
    if callable(to_native):
        return to_native()
    return value

def load_graph_file(path: Union[str, Path]) -> InstanceGraph:
    """
    Load a graph document from a YAML or JSON file.

    YAML files are read with the YAML 1.1 safe loader, which turns an unquoted
    ``12:30`` into the base-60 integer 750 and ``1809-02-12`` into a date.
    Quote time values ("12:30") to keep them as strings inferred as Time.
    """
    path = Path(path)
    if not path.exists():
        raise GraphSourceError(f"Graph file not found at {path}", 'graph_unreadable', {'path': str(path)})

    try:
        with open(path, 'r') as f:
            if path.suffix.lower() == '.json':
                document = json.load(f)
            else:
                document = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise GraphSourceError(
            f"Unable to read graph file {path}: {str(e)}",
            'graph_unreadable',
            {'path': str(path)}
        ) from e

    return InstanceGraph.from_document(document, name=str(path))
