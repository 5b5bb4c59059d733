"""Parser for ``jj op log`` output produced with ``OP_LOG_TEMPLATE``."""

from __future__ import annotations

from ...model import Operation

MIN_OP_FIELDS = 4


def parse_op_log(output: str) -> list[Operation]:
    """Parse operation rows, newest first; the first row is the current operation.

    Rows with fewer than four fields are skipped.
    """
    operations: list[Operation] = []
    for raw_line in output.splitlines():
        if not raw_line.strip():
            continue
        fields = raw_line.split("\t", MIN_OP_FIELDS - 1)
        if len(fields) < MIN_OP_FIELDS:
            continue
        operations.append(
            Operation(
                id=fields[0],
                user=fields[1],
                timestamp=fields[2],
                description=fields[3],
                is_current=not operations,
            )
        )
    return operations
