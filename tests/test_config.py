"""
Tests for RuntimeConfig loading and validation.

Verifies that:
1.  Defaults match the built-in behaviour (`llvm::` qualification).
2.  pyproject.toml settings are picked up and CLI overrides win.
3.  Invalid namespaces, families and patterns are rejected.
"""

import pytest
from pydantic import ValidationError

from mlir_cast_migrator.config import RuntimeConfig, parse_cli_key_values


def _write_toml(path, body):
  (path / "pyproject.toml").write_text(body, encoding="utf-8")


def test_defaults():
  config = RuntimeConfig()
  assert config.namespace_prefix == "llvm::"
  assert config.default_family == "::mlir::Value"
  assert config.generic_pointer_receivers == []
  assert config.max_passes == 4


def test_default_family_resolved_to_qualified_name():
  assert RuntimeConfig(default_family="Type").default_family == "::mlir::Type"


@pytest.mark.parametrize(
  "kwargs",
  [
    {"namespace_prefix": "llvm"},
    {"default_family": "Location"},
    {"generic_pointer_receivers": ["("]},
    {"max_passes": 0},
  ],
)
def test_invalid_values_rejected(kwargs):
  with pytest.raises(ValidationError):
    RuntimeConfig(**kwargs)


def test_empty_namespace_allowed():
  assert RuntimeConfig(namespace_prefix="").namespace_prefix == ""


def test_load_from_toml(tmp_path):
  _write_toml(
    tmp_path,
    '[tool.mlir_cast_migrator]\nnamespace_prefix = "mlir::"\ngeneric_pointer_receivers = ["Union$"]\nmax_passes = 2\n',
  )
  config = RuntimeConfig.load(search_path=tmp_path)

  assert config.namespace_prefix == "mlir::"
  assert config.generic_pointer_receivers == ["Union$"]
  assert config.max_passes == 2


def test_load_searches_parents(tmp_path):
  _write_toml(tmp_path, '[tool.mlir_cast_migrator]\ndefault_family = "Attribute"\n')
  nested = tmp_path / "lib" / "IR"
  nested.mkdir(parents=True)

  assert RuntimeConfig.load(search_path=nested).default_family == "::mlir::Attribute"


def test_cli_overrides_toml(tmp_path):
  _write_toml(tmp_path, '[tool.mlir_cast_migrator]\nnamespace_prefix = "mlir::"\ngeneric_pointer_receivers = ["a"]\n')
  config = RuntimeConfig.load(
    namespace_prefix="llvm::",
    generic_pointer_receivers=["b"],
    overrides={"max_passes": 3},
    search_path=tmp_path,
  )

  assert config.namespace_prefix == "llvm::"
  assert config.generic_pointer_receivers == ["a", "b"]
  assert config.max_passes == 3


def test_unknown_keys_ignored(tmp_path):
  config = RuntimeConfig.load(overrides={"bogus": 1}, search_path=tmp_path)
  assert not hasattr(config, "bogus")


def test_single_pattern_override_wrapped(tmp_path):
  config = RuntimeConfig.load(overrides={"generic_pointer_receivers": "Union$"}, search_path=tmp_path)
  assert config.generic_pointer_receivers == ["Union$"]


def test_parse_cli_key_values():
  parsed = parse_cli_key_values(["max_passes=2", "namespace_prefix=mlir::", "flag=true", "broken"])
  assert parsed == {"max_passes": 2, "namespace_prefix": "mlir::", "flag": True}


def test_parse_cli_key_values_empty():
  assert parse_cli_key_values(None) == {}
