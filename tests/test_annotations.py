"""Tests for diagram annotation parsing."""

import pytest

from diagram_gen.annotations import parse_annotation, split_key_value_pairs
from diagram_gen.errors import AnnotationError


# ===================================================================
# Tokenizing
# ===================================================================

def test_split_simple() -> None:
    assert split_key_value_pairs("type=service,name=Users") == ["type=service", "name=Users"]


def test_split_keeps_list_values_whole() -> None:
    tokens = split_key_value_pairs("name=A,connectsTo=B;C;D,page=P")
    assert tokens == ["name=A", "connectsTo=B;C;D", "page=P"]


def test_split_semicolon_before_pair_starts_new_token() -> None:
    tokens = split_key_value_pairs("name=A,connectsTo=B;C;page=P")
    assert tokens == ["name=A", "connectsTo=B;C", "page=P"]


def test_split_drops_blanks() -> None:
    assert split_key_value_pairs(" name=A , ,type=cache ") == ["name=A", "type=cache"]


# ===================================================================
# Parsing
# ===================================================================

def test_parse_full_annotation() -> None:
    ann = parse_annotation(
        "type=database,name=UsersDB,description=Stores users,"
        "page=Data,swimlane=Storage,shape=iso:database"
    )
    comp = ann.to_component()
    assert comp.name == "UsersDB"
    assert comp.type == "database"
    assert comp.description == "Stores users"
    assert comp.page == "Data"
    assert comp.swimlane == "Storage"
    assert comp.shape == "iso:database"
    assert ann.to_connections() == []


def test_type_defaults_to_service() -> None:
    assert parse_annotation("name=Api").component_type == "service"


def test_connections_inherit_annotation_fields() -> None:
    ann = parse_annotation(
        "name=Api,connectsTo=Db;Cache,direction=bidirectional,page=Core,"
        "edgeStyle=orthogonalEdgeStyle,startArrow=oval,endArrow=block"
    )
    conns = ann.to_connections()
    assert [(c.source, c.target) for c in conns] == [("Api", "Db"), ("Api", "Cache")]
    for conn in conns:
        assert conn.bidirectional
        assert conn.page == "Core"
        assert conn.edge_style == "orthogonalEdgeStyle"
        assert conn.start_arrow == "oval"
        assert conn.end_arrow == "block"


def test_connections_default_unidirectional() -> None:
    conn = parse_annotation("name=A,connectsTo=B").to_connections()[0]
    assert conn.direction == "unidirectional"


def test_empty_targets_dropped() -> None:
    ann = parse_annotation("name=A,connectsTo=B;;C")
    assert [c.target for c in ann.to_connections()] == ["B", "C"]


def test_style_keys_collected() -> None:
    ann = parse_annotation("name=A,fillColor=#ff0000,rounded=1,bogus=x,fontSize=14")
    assert ann.style == "fillColor=#ff0000;rounded=1;fontSize=14"
    assert ann.to_component().style == ann.style


def test_backticks_quotes_and_bare_words() -> None:
    ann = parse_annotation('`diagram,name="Quoted",type=queue`')
    assert ann.name == "Quoted"
    assert ann.component_type == "queue"


def test_missing_name_rejected() -> None:
    with pytest.raises(AnnotationError, match="name is required"):
        parse_annotation("type=service,connectsTo=B")


def test_empty_tag_rejected() -> None:
    with pytest.raises(AnnotationError):
        parse_annotation("")
