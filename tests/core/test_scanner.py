"""
Tests for the Lexical Call-Site Scanner.

Verifies receiver boundary detection, call-end detection, masking of comments
and literals, and family assignment.
"""

import pytest

from mlir_cast_migrator.core.scanner import LexicalCallScanner, find_receiver_start, mask_non_code


def _scan(source, **kwargs):
  return list(LexicalCallScanner(**kwargs).match_call_sites(source))


def test_simple_dot_call():
  source = "auto x = Op.dyn_cast<Foo>();\n"
  (match,) = _scan(source)

  assert match.call_text == "Op.dyn_cast<Foo>()"
  assert match.full_range.begin == source.index("Op")
  assert match.full_range.end == source.index(";")
  assert match.member_name == "dyn_cast"
  assert match.is_arrow_access is False
  assert match.family == "::mlir::Value"
  assert match.is_generic_pointer_family is False


def test_arrow_with_template_keyword():
  source = "if (auto f = ptr->template cast<Bar>()) {}"
  (match,) = _scan(source)
  assert match.call_text == "ptr->template cast<Bar>()"
  assert match.is_arrow_access is True
  assert match.member_name == "cast"


def test_chained_receiver():
  source = "x = getDefiningOp()->getResult(0).cast<Value>();"
  (match,) = _scan(source)
  assert match.call_text == "getDefiningOp()->getResult(0).cast<Value>()"


def test_template_id_receiver():
  source = "y = x.getAs<Foo>().isa<Bar>();"
  (match,) = _scan(source)
  assert match.call_text == "x.getAs<Foo>().isa<Bar>()"


def test_variadic_isa():
  source = "return v.isa<A, B, C...>();"
  (match,) = _scan(source)
  assert match.call_text == "v.isa<A, B, C...>()"
  assert match.member_name == "isa"


def test_nested_calls_both_reported():
  source = "a.cast<B>().dyn_cast<C>();"
  matches = _scan(source)
  assert [m.call_text for m in matches] == ["a.cast<B>()", "a.cast<B>().dyn_cast<C>()"]


def test_free_functions_and_lookalikes_ignored():
  source = "llvm::cast<Foo>(x); y.dyn_cast_if_present<T>(); z.castAway<T>(); w.cast<T>;"
  assert _scan(source) == []


def test_comments_and_strings_ignored():
  source = '// v.cast<T>()\n/* v.isa<T>() */\nconst char *s = "v.dyn_cast<T>()";\n'
  assert _scan(source) == []


def test_mask_preserves_offsets():
  source = 'a /* x */ "s.t" b\n// c\nd'
  masked = mask_non_code(source)
  assert len(masked) == len(source)
  assert masked.count("\n") == source.count("\n")
  assert masked.startswith("a ")
  assert masked.endswith("d")


def test_receiver_start_stops_at_operator():
  text = "x = a + b.cast"
  assert find_receiver_start(text, text.index(".")) == text.index("b")


def test_receiver_start_crosses_brackets():
  text = "(*ptr)[2].cast"
  assert find_receiver_start(text, text.index(".cast")) == 0


def test_generic_pointer_receivers():
  source = "ptrUnion.dyn_cast<A *>(); val.dyn_cast<B>();"
  matches = _scan(source, generic_pointer_receivers=["Union$"])

  assert matches[0].family == "::llvm::PointerUnion"
  assert matches[0].is_generic_pointer_family is True
  assert matches[1].family == "::mlir::Value"
  assert matches[1].is_generic_pointer_family is False


def test_default_family_override():
  (match,) = _scan("t.isa<IntegerType>();", default_family="Type")
  assert match.family == "::mlir::Type"


def test_unknown_default_family_rejected():
  with pytest.raises(ValueError, match="Unknown cast family"):
    LexicalCallScanner(default_family="Nope")


def test_multiline_call():
  source = "auto r = value\n    .dyn_cast<OpResult>();"
  (match,) = _scan(source)
  assert match.call_text == "value\n    .dyn_cast<OpResult>()"


@pytest.mark.parametrize(
  "source, call_text",
  [
    ("x = p-> template cast<T>();", "p-> template cast<T>()"),
    ("x = p->template\n  cast<T>();", "p->template\n  cast<T>()"),
  ],
)
def test_template_keyword_spacing(source, call_text):
  (match,) = _scan(source)
  assert match.call_text == call_text
  assert match.member_name == "cast"
  assert match.is_arrow_access is True


@pytest.mark.parametrize(
  "source",
  ["auto t = x.cast<std::tuple<Ts...>>();", "f(x.dyn_cast<T>(args...));"],
)
def test_pack_expansion_outside_isa_skipped(source):
  assert _scan(source) == []
