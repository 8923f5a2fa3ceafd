"""弹性模块：单次尝试加截止时间的执行模型。

Resilience module.

Remote calls are single-attempt; the only protection is a per-operation
deadline.
"""

from eleven_mcp.resilience.timeout import (
    DEADLINE_MULTIPLIERS,
    OperationKind,
    deadline_for,
    race_with_timeout,
)

__all__ = [
    "DEADLINE_MULTIPLIERS",
    "OperationKind",
    "deadline_for",
    "race_with_timeout",
]
