from .fix import handle_fix, _fix_single_file, _print_batch_summary
from .rewrite import handle_rewrite
from .families import handle_families

__all__ = [
  "_fix_single_file",
  "_print_batch_summary",
  "handle_families",
  "handle_fix",
  "handle_rewrite",
]
