"""
Property tests for the rewrite core.

Verifies invariants over generated receivers and template arguments:
1.  Splitting then re-joining reproduces the call text.
2.  Function normalization is idempotent.
3.  Rewritten calls are a fixed point for the scanner.
"""

from hypothesis import given, settings, strategies as st

from mlir_cast_migrator.core.emitter import PatchEmitter
from mlir_cast_migrator.core.normalizers import FunctionNormalizer
from mlir_cast_migrator.core.scanner import LexicalCallScanner
from mlir_cast_migrator.core.splitter import join_split, split_call
from mlir_cast_migrator.enums import CastMethod

identifiers = st.from_regex(r"[A-Za-z_][A-Za-z0-9_]{0,8}", fullmatch=True)
members = st.sampled_from([m.value for m in CastMethod])
receivers = st.lists(st.tuples(identifiers, st.sampled_from([".", "->"])), min_size=1, max_size=3).map(
  lambda parts: "".join(name + sep for name, sep in parts[:-1]) + parts[-1][0]
)


@given(receiver=receivers, member=members, type_arg=identifiers, arrow=st.booleans())
@settings(max_examples=50)
def test_split_join_roundtrip(receiver, member, type_arg, arrow):
  sep = "->" if arrow else "."
  text = f"{receiver}{sep}{member}<{type_arg}>("

  split = split_call(text, arrow)
  assert split.object_text == receiver
  assert join_split(split, arrow) == text


@given(member=members, type_arg=identifiers, generic=st.booleans(), template=st.booleans())
@settings(max_examples=50)
def test_normalize_idempotent(member, type_arg, generic, template):
  normalizer = FunctionNormalizer()
  text = ("template " if template else "") + f"{member}<{type_arg}>("

  once = normalizer.normalize(text, generic_pointer=generic)
  assert normalizer.normalize(once, generic_pointer=generic) == once
  assert "dyn_cast_or_null" not in once


@given(receiver=receivers, member=members, type_arg=identifiers, arrow=st.booleans(), generic=st.booleans())
@settings(max_examples=50)
def test_rewrite_reaches_fixed_point(receiver, member, type_arg, arrow, generic):
  sep = "->" if arrow else "."
  replacement = PatchEmitter().build_replacement(f"{receiver}{sep}{member}<{type_arg}>()", arrow, generic)

  assert replacement.startswith("llvm::")
  assert list(LexicalCallScanner().match_call_sites(replacement + ";")) == []
