"""Test helpers shared across test modules."""

from __future__ import annotations

from typing import Any


def executed_sql(connection: Any) -> list[str]:
    """SQL text of every statement passed to ``connection.execute``, in order."""
    return [str(call.args[0]) for call in connection.execute.await_args_list]
