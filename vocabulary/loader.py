# vocabulary/loader.py
from pathlib import Path
from typing import List, Dict, Any, Union, IO, Iterable, Tuple
import json
import logging

from utils.error_handler import SchemaLoadError
from utils.record_utils import context_prefixes, expand_record

DATA_DIR = Path(__file__).parent / 'data'

# Bundled vocabularies, in load order
BUILTIN_SCHEMAS: List[Tuple[str, str]] = [
    ('schema.jsonld', 'Schema.org'),
    ('ext-auto.jsonld', 'Auto'),
    ('ext-bib.jsonld', 'Bib'),
    ('ext-health-lifesci.jsonld', 'Health/Life Science'),
    ('ext-meta.jsonld', 'Meta'),
    ('ext-pending.jsonld', 'Pending'),
]

SchemaSource = Union[str, Path, IO, Dict[str, Any]]

class VocabularyLoader:
    """Reads JSON-LD vocabulary documents into a flat list of item records."""

    def __init__(self, data_dir: Union[str, Path] = DATA_DIR):
        self.data_dir = Path(data_dir)
        self.logger = logging.getLogger(self.__class__.__name__)

    def load(self, additional_sources: Iterable[SchemaSource] = (),
             include_builtin: bool = True) -> List[Dict[str, Any]]:
        """Load the bundled vocabularies followed by any additional sources."""
        records: List[Dict[str, Any]] = []

        if include_builtin:
            for filename, name in BUILTIN_SCHEMAS:
                records.extend(self.load_stream(self.data_dir / filename, name))

        for i, source in enumerate(additional_sources):
            records.extend(self.load_stream(source, f"Additional Stream #{i}"))

        return records

    def load_stream(self, source: SchemaSource, name: str) -> List[Dict[str, Any]]:
        """
        Load the @graph items of one vocabulary document.
        Unreadable or malformed documents are logged and yield no items.
        """
        self.logger.info(f"Loading schema {name}")

        try:
            document = self.read_document(source)
            return self.extract_items(document, name)
        except SchemaLoadError as e:
            self.logger.error(f"Unable to read schema {name}: {str(e)}")
            return []

    def read_document(self, source: SchemaSource) -> Dict[str, Any]:
        if isinstance(source, dict):
            return source

        try:
            if isinstance(source, (str, Path)):
                with open(source, 'rb') as f:
                    return json.load(f)
            return json.load(source)
        except (OSError, ValueError) as e:
            raise SchemaLoadError(
                str(e), 'schema_unreadable', {'source': str(source)}
            ) from e

    def extract_items(self, document: Any, name: str) -> List[Dict[str, Any]]:
        if not isinstance(document, dict) or not isinstance(document.get('@graph'), list):
            raise SchemaLoadError(
                f"Unable to read @graph object from schema {name} - not in expected format",
                'schema_format',
                {'schema': name}
            )

        prefixes = context_prefixes(document.get('@context'))
        items = [
            expand_record(item, prefixes) if isinstance(item, dict) else item
            for item in document['@graph']
        ]

        self.logger.debug(f"Read {len(items)} items from schema {name}")
        return items
