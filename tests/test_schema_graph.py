# tests/test_schema_graph.py
import logging
import pytest

from database.schema_graph import SchemaGraph
from services.schema_compiler import SchemaCompiler
from utils.error_handler import UnknownClassError

SCHEMA = 'http://schema.org/'

@pytest.fixture
def zoo(zoo_records) -> SchemaGraph:
    return SchemaCompiler().compile(zoo_records)

def test_class_by_label(zoo):
    assert zoo.class_by_label('Dog') == SCHEMA + 'Dog'

def test_class_by_label_unknown(zoo):
    with pytest.raises(UnknownClassError) as excinfo:
        zoo.class_by_label('Unicorn')
    assert excinfo.value.label == 'Unicorn'
    assert excinfo.value.error_code == 'unknown_class'

def test_class_by_label_duplicates_pick_first(caplog):
    schema = SchemaGraph()
    schema.set_label('http://a.example/Item', 'Item')
    schema.set_label('http://b.example/Item', 'Item')

    with caplog.at_level(logging.WARNING):
        assert schema.class_by_label('Item') == 'http://a.example/Item'
    assert "More than one class" in caplog.text

def test_relabelling_updates_index():
    schema = SchemaGraph()
    schema.set_label('x', 'Old')
    schema.set_label('x', 'New')

    assert schema.class_by_label('New') == 'x'
    with pytest.raises(UnknownClassError):
        schema.class_by_label('Old')

def test_is_of_type_is_reflexive(zoo):
    for label in ('Thing', 'Animal', 'Goat', 'Text'):
        assert zoo.is_of_type(zoo.class_by_label(label), label)

def test_is_of_type_accepts_descendants(zoo):
    animal = zoo.class_by_label('Animal')
    assert zoo.is_of_type(animal, 'Dog')
    assert zoo.is_of_type(animal, 'Goat')
    assert zoo.is_of_type(zoo.class_by_label('Text'), 'URL')

def test_is_of_type_never_follows_parents(zoo):
    assert not zoo.is_of_type(zoo.class_by_label('Dog'), 'Animal')
    assert not zoo.is_of_type(zoo.class_by_label('Livestock'), 'Dog')

def test_is_of_type_never_matches_missing_label(zoo):
    zoo.add_class(SCHEMA + 'Bare')
    assert not zoo.is_of_type(SCHEMA + 'Bare', None)

def test_has_property_direct(zoo):
    assert zoo.has_property(zoo.class_by_label('Keeper'), 'caredFor', 'Pet')
    assert zoo.has_property(zoo.class_by_label('Keeper'), 'caredFor', 'Dog')
    assert not zoo.has_property(zoo.class_by_label('Keeper'), 'caredFor', 'Livestock')

def test_has_property_inherited_through_any_parent(zoo):
    goat = zoo.class_by_label('Goat')
    # declared on Livestock, reached through the second parent
    assert zoo.has_property(goat, 'milkYield', 'Integer')
    # declared on Thing, reached through both parents
    assert zoo.has_property(goat, 'name', 'Text')
    assert not zoo.has_property(zoo.class_by_label('Dog'), 'milkYield', 'Number')

def test_has_property_rejects_wrong_range(zoo):
    assert not zoo.has_property(zoo.class_by_label('Dog'), 'legs', 'Text')

def test_cyclic_hierarchy_terminates():
    schema = SchemaGraph()
    for name in ('A', 'B', 'C'):
        schema.set_label(name, name)
    schema.add_parent('A', 'B')
    schema.add_parent('B', 'C')
    schema.add_parent('C', 'A')
    schema.add_property('A', 'B', 'next')

    assert schema.is_of_type('A', 'C')
    assert not schema.is_of_type('A', 'Missing')
    assert schema.has_property('C', 'next', 'A')
    assert not schema.has_property('C', 'previous', 'A')

def test_properties_of(zoo):
    assert zoo.properties_of(zoo.class_by_label('Animal')) == {'legs'}

def test_duplicate_property_edge_is_stored_once():
    schema = SchemaGraph()
    schema.add_property('A', 'B', 'p')
    schema.add_property('A', 'B', 'p')
    assert schema.property_edge_count == 1

def test_close_releases_graph(zoo):
    zoo.close()
    assert len(zoo) == 0
    assert zoo.property_edge_count == 0
