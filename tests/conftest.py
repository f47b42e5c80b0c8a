# tests/conftest.py
import pytest
from pathlib import Path
import tempfile
import yaml
from typing import Dict, Any, List

from config import Config
from services.validation import GraphValidator

SCHEMA = 'http://schema.org/'

def class_record(name: str, *parents: str, **extra) -> Dict[str, Any]:
    record = {'@id': SCHEMA + name, '@type': 'rdfs:Class', 'rdfs:label': name}
    if parents:
        record['rdfs:subClassOf'] = [{'@id': SCHEMA + p} for p in parents]
    record.update(extra)
    return record

def property_record(name: str, domains: List[str], ranges: List[str], **extra) -> Dict[str, Any]:
    record = {
        '@id': SCHEMA + name,
        '@type': 'rdf:Property',
        'rdfs:label': name,
        SCHEMA + 'domainIncludes': [{'@id': SCHEMA + d} for d in domains],
        SCHEMA + 'rangeIncludes': [{'@id': SCHEMA + r} for r in ranges],
    }
    record.update(extra)
    return record

@pytest.fixture
def zoo_records() -> List[Dict[str, Any]]:
    """A small vocabulary with diamond inheritance."""
    return [
        class_record('Text'),
        class_record('URL', 'Text'),
        class_record('Number'),
        class_record('Integer', 'Number'),
        class_record('Thing'),
        class_record('Animal', 'Thing'),
        class_record('Pet', 'Animal'),
        class_record('Livestock', 'Animal'),
        class_record('Dog', 'Pet'),
        class_record('Goat', 'Pet', 'Livestock'),
        class_record('Keeper', 'Thing'),
        property_record('name', ['Thing'], ['Text']),
        property_record('legs', ['Animal'], ['Integer']),
        property_record('caredFor', ['Keeper'], ['Pet']),
        property_record('milkYield', ['Livestock'], ['Number']),
    ]

@pytest.fixture
def zoo_document(zoo_records) -> Dict[str, Any]:
    return {'@context': {'rdfs': 'http://www.w3.org/2000/01/rdf-schema#'}, '@graph': zoo_records}

@pytest.fixture(scope='session')
def validator():
    """Validator over the bundled vocabularies, including superseded items."""
    with GraphValidator(True) as gv:
        yield gv

@pytest.fixture
def test_config() -> Config:
    """Create test configuration."""
    config_data = {
        'schema': {
            'include_superseded': True,
            'additional_schemas': []
        },
        'validation': {
            'fail_fast': True
        },
        'neo4j': {
            'uri': 'bolt://localhost:7687',
            'user': 'neo4j',
            'password': 'test_password'
        },
        'logging': {
            'level': 'DEBUG',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        }
    }

    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump(config_data, f)
        return Config(f.name)

@pytest.fixture
def graph_files(tmp_path: Path) -> Dict[str, Path]:
    """Create graph documents on disk."""
    files = {}

    valid_path = tmp_path / "lincoln.yaml"
    valid_path.write_text(
        "nodes:\n"
        "  - id: lincoln\n"
        "    label: Person\n"
        "    properties:\n"
        "      name: Abraham Lincoln\n"
        "      birthDate: 1809-02-12\n"
        "  - id: hodgenville\n"
        "    label: Place\n"
        "    properties:\n"
        "      name: Hodgenville, Kentucky\n"
        "edges:\n"
        "  - source: lincoln\n"
        "    target: hodgenville\n"
        "    label: birthPlace\n"
    )
    files['valid'] = valid_path

    invalid_path = tmp_path / "pet.json"
    invalid_path.write_text(
        '{"nodes": [{"id": 1, "label": "Person", "properties": {"favouritePet": "Cat"}},'
        ' {"id": 2, "label": "Animal"}], "edges": []}'
    )
    files['invalid'] = invalid_path

    broken_path = tmp_path / "broken.yaml"
    broken_path.write_text("nodes:\n  - label: Person\n")
    files['broken'] = broken_path

    return files
