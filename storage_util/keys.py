"""Full storage key composition.

A full key is the backend prefix, the accessor key and the per-call postfix
joined with ``"."``. Empty components are left out together with their
delimiter, so ``build_key("pre", "user:42", None)`` gives ``"pre.user:42"``.
"""
from __future__ import annotations
from typing import Optional

DELIMITER = "."


def build_key(*components: Optional[str]) -> str:
    """Join non-empty key components with the delimiter.

    ``build_key(key, postfix)`` and ``build_key(prefix, key, postfix)`` are the
    two shapes used in the package; both chain with the same rule.
    """
    return DELIMITER.join(c for c in components if c)
