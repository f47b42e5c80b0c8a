# utils/record_utils.py
from typing import List, Dict, Any, Optional, Iterable
import re

SCHEMA_NS = 'http://schema.org/'
RDF_NS = 'http://www.w3.org/1999/02/22-rdf-syntax-ns#'
RDFS_NS = 'http://www.w3.org/2000/01/rdf-schema#'

# Each vocabulary term is accepted in its expanded and compact spelling
LABEL_KEYS = ('@label', 'rdfs:label', RDFS_NS + 'label')
SUBCLASS_KEYS = ('rdfs:subClassOf', RDFS_NS + 'subClassOf')
DOMAIN_KEYS = (SCHEMA_NS + 'domainIncludes', 'schema:domainIncludes')
RANGE_KEYS = (SCHEMA_NS + 'rangeIncludes', 'schema:rangeIncludes')
SUPERSEDED_KEYS = (SCHEMA_NS + 'supersededBy', 'schema:supersededBy')
PROPERTY_TYPES = ('rdf:Property', RDF_NS + 'Property')

REFERENCE_KEYS = SUBCLASS_KEYS + DOMAIN_KEYS + RANGE_KEYS

_CURIE = re.compile(r'^([A-Za-z][\w.-]*):(?!//)(.*)$')

class RecordReader:
    """Helpers for reading loosely-typed vocabulary item records."""

    @staticmethod
    def as_list(value: Any) -> List[Any]:
        """Wrap a single value in a list; None becomes an empty list."""
        if value is None:
            return []
        if isinstance(value, list):
            return value
        return [value]

    @staticmethod
    def as_string_list(value: Any) -> List[str]:
        return [str(v) for v in RecordReader.as_list(value)]

    @staticmethod
    def as_id_list(value: Any) -> List[str]:
        """
        Extract referenced identities from a record field.
        Accepts plain identity strings and {"@id": ...} objects, single or listed.
        """
        ids = []
        for item in RecordReader.as_list(value):
            if isinstance(item, dict):
                ref = item.get('@id')
                if ref is not None:
                    ids.append(str(ref))
            elif isinstance(item, str):
                ids.append(item)
        return ids

    @staticmethod
    def first_value(record: Dict[str, Any], keys: Iterable[str]) -> Any:
        """Return the value of the first key present in the record."""
        for key in keys:
            if key in record:
                return record[key]
        return None

    @staticmethod
    def has_any(record: Dict[str, Any], keys: Iterable[str]) -> bool:
        return any(key in record for key in keys)

    @staticmethod
    def get_label(record: Dict[str, Any]) -> Optional[str]:
        """
        Derive a display label for a record.
        Uses an explicit label when present, otherwise the last segment of @id.
        """
        label = RecordReader._literal(RecordReader.first_value(record, LABEL_KEYS))
        if label:
            return label

        if '@id' in record:
            return RecordReader.local_name(str(record['@id']))

        return None

    @staticmethod
    def local_name(identity: str) -> str:
        """
        Last path segment of a URI, then whatever follows its last '#' or ':'.
        'http://schema.org/Person' -> 'Person', 'rdfs:label' -> 'label',
        'urn:isbn:0451450523' -> '0451450523'.
        """
        name = identity.rstrip('/').split('/')[-1]
        for separator in ('#', ':'):
            if separator in name:
                name = name.split(separator)[-1]
        return name

    @staticmethod
    def _literal(value: Any) -> Optional[str]:
        # rdfs:label may be a plain string, a {"@value": ...} object or a list of either
        if isinstance(value, list):
            value = value[0] if value else None
        if isinstance(value, dict):
            value = value.get('@value')
        if value is None:
            return None
        return str(value)

def context_prefixes(context: Any) -> Dict[str, str]:
    """Collect the prefix -> namespace mappings declared in a JSON-LD @context."""
    prefixes = {}
    for entry in RecordReader.as_list(context):
        if not isinstance(entry, dict):
            continue
        for prefix, namespace in entry.items():
            if isinstance(namespace, str) and not prefix.startswith('@'):
                prefixes[prefix] = namespace
            elif isinstance(namespace, dict) and isinstance(namespace.get('@id'), str):
                prefixes[prefix] = namespace['@id']
    return prefixes

def expand_identifier(value: str, prefixes: Dict[str, str]) -> str:
    """Expand a compact identifier such as schema:Person using the given prefixes."""
    match = _CURIE.match(value)
    if not match or match.group(1) not in prefixes:
        return value
    return prefixes[match.group(1)] + match.group(2)

def expand_record(record: Dict[str, Any], prefixes: Dict[str, str]) -> Dict[str, Any]:
    """
    Expand compact identifiers in a record.
    Covers the record's own @id, every nested {"@id": ...} reference and plain
    string references under the subclass/domain/range keys.
    """
    if not prefixes:
        return record

    def expand_reference(value, plain_strings):
        if isinstance(value, dict) and isinstance(value.get('@id'), str):
            return {**value, '@id': expand_identifier(value['@id'], prefixes)}
        if plain_strings and isinstance(value, str):
            return expand_identifier(value, prefixes)
        return value

    expanded = {}
    for key, value in record.items():
        plain_strings = key in REFERENCE_KEYS
        if key == '@id' and isinstance(value, str):
            expanded[key] = expand_identifier(value, prefixes)
        elif isinstance(value, list):
            expanded[key] = [expand_reference(v, plain_strings) for v in value]
        else:
            expanded[key] = expand_reference(value, plain_strings)
    return expanded
