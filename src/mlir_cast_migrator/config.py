"""
Runtime Configuration Store.

Settings are read from the `[tool.mlir_cast_migrator]` table of the nearest
`pyproject.toml` and overridden by CLI arguments:

.. code-block:: toml

    [tool.mlir_cast_migrator]
    namespace_prefix = "llvm::"
    generic_pointer_receivers = ["^pu$", "Union$"]
    default_family = "::mlir::Value"
    max_passes = 4

The family table itself is compiled in (`mlir_cast_migrator.families`) and is
not configurable here.
"""

import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator

from mlir_cast_migrator.families import DEFAULT_FAMILIES
from mlir_cast_migrator.utils.console import log_warning

if sys.version_info >= (3, 11):
  import tomllib
else:
  try:
    import tomli as tomllib
  except ImportError:
    tomllib = None  # type: ignore

TOOL_SECTION = "mlir_cast_migrator"


class RuntimeConfig(BaseModel):
  """
  Configuration container for the migration engine.
  """

  namespace_prefix: str = Field("llvm::", description="Qualifier injected before the free function name.")
  check_name: str = Field("misc-mlir-cast", description="Check identifier reported with each diagnostic.")
  generic_pointer_receivers: List[str] = Field(
    default_factory=list,
    description="Regexes; scanner receivers matching any of them belong to the generic-pointer family.",
  )
  default_family: str = Field("::mlir::Value", description="Family assigned to scanner matches by default.")
  max_passes: int = Field(4, ge=1, description="Upper bound on re-scan passes for nested calls.")

  @field_validator("namespace_prefix")
  @classmethod
  def validate_namespace(cls, v: str) -> str:
    """
    Ensures the prefix is empty or a qualifier ending in '::'.

    Raises:
        ValueError: If the prefix would not form a qualified name.
    """
    v_clean = v.strip()
    if v_clean and not v_clean.endswith("::"):
      raise ValueError(f"Namespace prefix must end with '::' (got '{v_clean}')")
    return v_clean

  @field_validator("default_family")
  @classmethod
  def validate_family(cls, v: str) -> str:
    """
    Resolves the default family to its qualified table name.

    Raises:
        ValueError: If the family is not tracked.
    """
    return DEFAULT_FAMILIES.require(v).name

  @field_validator("generic_pointer_receivers")
  @classmethod
  def validate_patterns(cls, v: List[str]) -> List[str]:
    for pattern in v:
      try:
        re.compile(pattern)
      except re.error as e:
        raise ValueError(f"Invalid receiver pattern '{pattern}': {e}")
    return v

  @classmethod
  def load(
    cls,
    namespace_prefix: Optional[str] = None,
    generic_pointer_receivers: Optional[List[str]] = None,
    default_family: Optional[str] = None,
    max_passes: Optional[int] = None,
    overrides: Optional[Dict[str, Any]] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        namespace_prefix (Optional[str]): Override for the qualifier.
        generic_pointer_receivers (Optional[List[str]]): Extra receiver patterns, appended to TOML ones.
        default_family (Optional[str]): Override for the scanner's default family.
        max_passes (Optional[int]): Override for the pass limit.
        overrides (Optional[Dict]): Generic `key=value` overrides from the CLI.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)
    merged: Dict[str, Any] = {**toml_config, **(overrides or {})}

    if namespace_prefix is not None:
      merged["namespace_prefix"] = namespace_prefix
    if default_family is not None:
      merged["default_family"] = default_family
    if max_passes is not None:
      merged["max_passes"] = max_passes

    raw_patterns = merged.get("generic_pointer_receivers", [])
    patterns = [raw_patterns] if isinstance(raw_patterns, str) else list(raw_patterns)
    patterns.extend(generic_pointer_receivers or [])
    merged["generic_pointer_receivers"] = patterns

    known = set(cls.model_fields)
    unknown = sorted(k for k in merged if k not in known)
    for key in unknown:
      log_warning(f"Ignoring unknown config key: '{key}'")
      merged.pop(key)

    return cls(**merged)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory definition was found in.
  """
  if not tomllib:
    return {}, None

  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as e:
        log_warning(f"Could not read {toml_path}: {e}")
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get(TOOL_SECTION, {}), parent

  return {}, None


def parse_cli_key_values(items: Optional[List[str]]) -> Dict[str, Any]:
  """
  Parses a list of 'key=value' strings into a dictionary.

  Types are inferred (int, float, bool, or string).

  Args:
      items (Optional[List[str]]): List of raw CLI strings directly from argparse.

  Returns:
      Dict[str, Any]: Parsed dictionary.
  """
  if not items:
    return {}

  config = {}
  for item in items:
    if "=" not in item:
      log_warning(f"Ignoring invalid config format: '{item}'. Expected 'key=value'.")
      continue

    key, val_str = item.split("=", 1)
    key = key.strip()
    val_str = val_str.strip()

    final_val: Any = val_str

    if val_str.lower() == "true":
      final_val = True
    elif val_str.lower() == "false":
      final_val = False
    else:
      try:
        if "." in val_str or "e" in val_str:
          final_val = float(val_str)
        else:
          final_val = int(val_str)
      except ValueError:
        pass

    config[key] = final_val

  return config
