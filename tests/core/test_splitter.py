"""
Tests for the Call Splitter.

Verifies that:
1.  The rightmost separator matching the access style splits the call.
2.  Variadic `isa` packs split at `.isa` / `->isa` instead of inside `...`.
3.  Calls without a separator put everything in the object half.
4.  The closing parenthesis is dropped before splitting.
"""

import pytest

from mlir_cast_migrator.core.splitter import infer_arrow, join_split, literal_call_text, split_call


def test_literal_call_text_drops_closing_paren():
  assert literal_call_text("Op.dyn_cast<Foo>()") == "Op.dyn_cast<Foo>("
  assert literal_call_text("Op.dyn_cast<Foo>()  ") == "Op.dyn_cast<Foo>("


def test_literal_call_text_leaves_open_text():
  assert literal_call_text("Op.dyn_cast<Foo>(") == "Op.dyn_cast<Foo>("


def test_dot_split():
  res = split_call("Op.dyn_cast<Foo>(", is_arrow=False)
  assert res.object_text == "Op"
  assert res.function_text == "dyn_cast<Foo>("


def test_arrow_split():
  res = split_call("Ptr->cast<Bar>(", is_arrow=True)
  assert res.object_text == "Ptr"
  assert res.function_text == "cast<Bar>("


def test_rightmost_separator_wins_on_chains():
  res = split_call("a.getB().c.cast<T>(", is_arrow=False)
  assert res.object_text == "a.getB().c"
  assert res.function_text == "cast<T>("


def test_arrow_split_ignores_dots_in_receiver():
  res = split_call("a.b->cast<T>(", is_arrow=True)
  assert res.object_text == "a.b"


def test_variadic_isa_splits_at_isa():
  text = "Val.isa<A, B, C...>("
  res = split_call(text, is_arrow=False)
  assert res.object_text == "Val"
  assert res.function_text == "isa<A, B, C...>("


def test_variadic_isa_arrow():
  res = split_call("p->isa<A, B...>(", is_arrow=True)
  assert res.object_text == "p"
  assert res.function_text == "isa<A, B...>("


def test_generic_split_would_break_inside_pack():
  """
  Without the isa special case the last dot sits inside the pack expansion.
  """
  text = "Val.cast<Ts...>("
  res = split_call(text, is_arrow=False)
  assert res.function_text == ">("


def test_missing_separator_is_all_object():
  res = split_call("isa<Foo>(", is_arrow=True)
  assert res.object_text == "isa<Foo>("
  assert res.function_text == ""


def test_template_keyword_kept_in_function_half():
  res = split_call("Op.template cast<Foo>(", is_arrow=False)
  assert res.function_text == "template cast<Foo>("


def test_known_gap_separator_inside_template_args():
  """Only the rightmost separator is considered; this split is wrong by design."""
  res = split_call("x.cast<decltype(y.z)>(", is_arrow=False)
  assert res.object_text == "x.cast<decltype(y"


@pytest.mark.parametrize(
  "text,is_arrow",
  [
    ("Op.dyn_cast<Foo>(", False),
    ("Ptr->cast<Bar>(", True),
    ("a->b.isa<C>(", False),
  ],
)
def test_join_reconstructs_text(text, is_arrow):
  assert join_split(split_call(text, is_arrow), is_arrow) == text


@pytest.mark.parametrize(
  "text,expected",
  [
    ("Ptr->cast<Bar>()", True),
    ("Op.cast<X>()", False),
    ("p->isa<A, B...>()", True),
    ("a->b.cast<T>()", False),
    ("isa<T>()", False),
  ],
)
def test_infer_arrow(text, expected):
  assert infer_arrow(text) is expected
