# services/schema_compiler.py
from typing import Iterable, Dict, Any, Set, Optional
import logging
from dataclasses import dataclass, field

from database.schema_graph import SchemaGraph
from utils.record_utils import (
    RecordReader, SUBCLASS_KEYS, DOMAIN_KEYS, RANGE_KEYS, SUPERSEDED_KEYS, PROPERTY_TYPES
)

@dataclass
class PropertyDeclaration:
    """Domains and ranges of a property, merged across every record that declares it."""
    identity: str
    label: str
    domains: Set[str] = field(default_factory=set)
    ranges: Set[str] = field(default_factory=set)

    def merge(self, domains: Iterable[str], ranges: Iterable[str]):
        self.domains.update(domains)
        self.ranges.update(ranges)

class SchemaCompiler:
    """Compiles vocabulary item records into a SchemaGraph."""

    def __init__(self, include_superseded: bool = False):
        self.include_superseded = include_superseded
        self.logger = logging.getLogger(self.__class__.__name__)

    def compile(self, records: Iterable[Dict[str, Any]],
                schema_graph: Optional[SchemaGraph] = None) -> SchemaGraph:
        """Build the class hierarchy and property edges described by the records."""
        schema_graph = schema_graph if schema_graph is not None else SchemaGraph()
        properties: Dict[str, PropertyDeclaration] = {}

        skipped = 0
        for record in records:
            if not self._process_record(record, schema_graph, properties):
                skipped += 1

        for declaration in properties.values():
            for domain in declaration.domains:
                for range_ in declaration.ranges:
                    schema_graph.add_property(domain, range_, declaration.label)

        self.logger.info(
            f"Compiled schema with {schema_graph.class_count} classes, "
            f"{len(properties)} properties and {schema_graph.property_edge_count} property edges "
            f"({skipped} items skipped)"
        )
        return schema_graph

    def _process_record(self, record: Dict[str, Any], schema_graph: SchemaGraph,
                        properties: Dict[str, PropertyDeclaration]) -> bool:
        """Apply a single record; returns False if the record was skipped."""
        if not isinstance(record, dict):
            self.logger.warning(f"Schema item of type {type(record).__name__} found - item will be skipped")
            return False

        if not self.include_superseded and RecordReader.has_any(record, SUPERSEDED_KEYS):
            return False

        identity = record.get('@id')
        if identity is None:
            self.logger.warning("Schema item with no @id found - item will be skipped")
            return False

        identity = str(identity)
        label = RecordReader.get_label(record)
        types = RecordReader.as_string_list(record.get('@type'))

        if any(t in PROPERTY_TYPES for t in types):
            if not label:
                self.logger.warning(f"Unable to determine label for property {identity}")
                return False

            declaration = properties.get(identity)
            if declaration is None:
                declaration = PropertyDeclaration(identity, label)
                properties[identity] = declaration

            declaration.merge(
                RecordReader.as_id_list(RecordReader.first_value(record, DOMAIN_KEYS)),
                RecordReader.as_id_list(RecordReader.first_value(record, RANGE_KEYS))
            )
        else:
            schema_graph.add_class(identity)
            if label:
                schema_graph.set_label(identity, label)

            for parent_id in RecordReader.as_id_list(RecordReader.first_value(record, SUBCLASS_KEYS)):
                schema_graph.add_parent(parent_id, identity)

        return True
