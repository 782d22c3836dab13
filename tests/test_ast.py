import dataclasses
import json

import hypothesis.strategies as st
import pytest
from hypothesis import given

from queitite.queitite_ast import (
    Assign,
    Binary,
    Block,
    Call,
    ExpressionStmt,
    FunctionDecl,
    Grouping,
    If,
    Literal,
    Print,
    Program,
    Unary,
    Variable,
    count_nodes,
)


def test_nodes_are_immutable() -> None:
    node = Variable("x")
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.name = "y"  # type: ignore[misc]


def test_line_is_ignored_by_equality() -> None:
    assert Variable("x", line=1) == Variable("x", line=7)
    assert Variable("x") != Variable("y")


def test_kind_tags() -> None:
    assert Binary("+", Literal(1), Literal(2)).kind == "binary"
    assert ExpressionStmt(Variable("x")).kind == "expression_stmt"
    assert Program().kind == "program"


def test_children_in_source_order() -> None:
    left, right = Literal(1), Literal(2)
    assert Binary("+", left, right).children() == (left, right)
    call = Call(Variable("f"), (Literal(1), Literal(2)))
    assert call.children() == (Variable("f"), Literal(1), Literal(2))
    assert If(Variable("c"), Print(Literal(1))).children() == (
        Variable("c"),
        Print(Literal(1)),
    )


def test_walk_is_preorder() -> None:
    tree = Binary("+", Literal(1), Binary("*", Literal(2), Literal(3)))
    kinds = [n.kind for n in tree.walk()]
    assert kinds == ["binary", "literal", "binary", "literal", "literal"]
    assert count_nodes(tree) == 5


def test_function_decl_counts_body() -> None:
    fn = FunctionDecl("f", ("a",), Block((Print(Variable("a")),)))
    assert count_nodes(fn) == 4


def test_to_dict_basic() -> None:
    node = Assign("x", Literal(1, line=2), line=2)
    d = node.to_dict()
    assert d == {
        "kind": "assign",
        "line": 2,
        "target": "x",
        "value": {"kind": "literal", "line": 2, "value": 1},
    }


def test_to_dict_is_json_serializable() -> None:
    tree = Program(
        (
            ExpressionStmt(Call(Variable("f"), (Literal("s"), Literal(None)))),
            If(Unary("!", Literal(True)), Block(()), Print(Grouping(Literal(1.5)))),
        )
    )
    d = tree.to_dict()
    assert json.loads(json.dumps(d)) == d
    assert d["statements"][1]["else_branch"]["kind"] == "print"
    assert d["statements"][0]["expression"]["arguments"][1]["value"] is None


def test_nodes_are_hashable() -> None:
    assert hash(Binary("+", Literal(1), Literal(2))) == hash(
        Binary("+", Literal(1), Literal(2))
    )


@given(st.text(min_size=1), st.integers())  # type: ignore[misc]
def test_variable_equality(name: str, line: int) -> None:
    assert Variable(name, line=line) == Variable(name)
    assert Variable(name) != Variable(name + "x")


@given(st.integers(min_value=0, max_value=30))  # type: ignore[misc]
def test_count_nodes_of_left_fold(n: int) -> None:
    expr = Literal(0)
    for i in range(n):
        expr = Binary("+", expr, Literal(i + 1))
    assert count_nodes(expr) == 2 * n + 1


@pytest.mark.parametrize(  # type: ignore[misc]
    "left, right",
    [(True, 1), (False, 0), (1, 1.0), (None, False)],
)
def test_literal_equality_compares_payload_type(left: object, right: object) -> None:
    assert Literal(left) != Literal(right)
    assert Print(Literal(left)) != Print(Literal(right))
    assert Literal(left) == Literal(left, line=3)
    assert hash(Literal(left)) == hash(Literal(left, line=3))
