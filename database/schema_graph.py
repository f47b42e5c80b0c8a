# database/schema_graph.py
from typing import Dict, List, Optional, Set
import logging
import networkx as nx

from utils.error_handler import UnknownClassError

class SchemaGraph:
    """
    In-memory graph of a compiled vocabulary.

    Class nodes are keyed by identity. Inheritance edges (parent -> child) and
    property edges (domain -> range, keyed by property label) are held in two
    separate graphs over the same identities, so a property can never be
    mistaken for an is-a relation.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.hierarchy = nx.DiGraph()
        self.properties = nx.MultiDiGraph()

        # Labels are not unique; identities are kept in the order they were labelled
        self._label_index: Dict[str, List[str]] = {}

    def add_class(self, class_id: str) -> str:
        """Create the class node if it does not exist yet, and return its identity."""
        if class_id not in self.hierarchy:
            self.hierarchy.add_node(class_id, label=None)
            self.properties.add_node(class_id)
        return class_id

    def set_label(self, class_id: str, label: str):
        self.add_class(class_id)
        previous = self.hierarchy.nodes[class_id]['label']
        if previous == label:
            return

        if previous is not None:
            self._label_index[previous].remove(class_id)
            if not self._label_index[previous]:
                del self._label_index[previous]

        self.hierarchy.nodes[class_id]['label'] = label
        self._label_index.setdefault(label, []).append(class_id)

    def add_parent(self, parent_id: str, child_id: str):
        """Record that child_id is a sub-class of parent_id."""
        self.add_class(parent_id)
        self.add_class(child_id)
        self.hierarchy.add_edge(parent_id, child_id)

    def add_property(self, domain_id: str, range_id: str, label: str):
        self.add_class(domain_id)
        self.add_class(range_id)
        if not self.properties.has_edge(domain_id, range_id, key=label):
            self.properties.add_edge(domain_id, range_id, key=label)

    def __contains__(self, class_id: str) -> bool:
        return class_id in self.hierarchy

    def __len__(self) -> int:
        return self.hierarchy.number_of_nodes()

    @property
    def class_count(self) -> int:
        return self.hierarchy.number_of_nodes()

    @property
    def property_edge_count(self) -> int:
        return self.properties.number_of_edges()

    def label_of(self, class_id: str) -> Optional[str]:
        return self.hierarchy.nodes[class_id]['label']

    def parents_of(self, class_id: str) -> List[str]:
        return list(self.hierarchy.predecessors(class_id))

    def children_of(self, class_id: str) -> List[str]:
        return list(self.hierarchy.successors(class_id))

    def properties_of(self, class_id: str) -> Set[str]:
        """Labels of the properties declared directly on a class."""
        return {key for _, _, key in self.properties.out_edges(class_id, keys=True)}

    def property_targets(self, class_id: str, property_label: str) -> List[str]:
        """Range classes of a property declared directly on a class."""
        return [
            target
            for _, target, key in self.properties.out_edges(class_id, keys=True)
            if key == property_label
        ]

    def class_by_label(self, label: str) -> str:
        """
        Find the class carrying a label.
        Raises UnknownClassError if there is none; when several classes share the
        label, the first one labelled wins.
        """
        matches = self._label_index.get(label)
        if not matches:
            raise UnknownClassError(label)

        if len(matches) > 1:
            self.logger.warning(
                f"More than one class in schema found with the label {label}; "
                f"only the first one will be used"
            )

        return matches[0]

    def is_of_type(self, class_id: str, target_label: str) -> bool:
        """
        Check whether a class is, or has a descendant, labelled target_label.
        Only children are followed, never parents: a range of R accepts R or
        any sub-class of R.
        """
        # Bare forward references have no label and must never match
        if target_label is None:
            return False

        visited = set()
        stack = [class_id]

        while stack:
            current = stack.pop()
            if current in visited:
                continue
            visited.add(current)

            if self.hierarchy.nodes[current]['label'] == target_label:
                return True

            stack.extend(self.hierarchy.successors(current))

        return False

    def has_property(self, class_id: str, property_label: str, target_label: str,
                     _visited: Optional[Set[str]] = None) -> bool:
        """
        Check whether a class, or any of its ancestors, declares property_label
        with a range that accepts target_label.
        """
        visited = _visited if _visited is not None else set()
        if class_id in visited:
            return False
        visited.add(class_id)

        for target in self.property_targets(class_id, property_label):
            if self.is_of_type(target, target_label):
                return True

        # Inherited properties
        for parent in self.hierarchy.predecessors(class_id):
            if self.has_property(parent, property_label, target_label, visited):
                return True

        return False

    def close(self):
        """Release the graph data."""
        self.hierarchy.clear()
        self.properties.clear()
        self._label_index.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
