from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

One progress bar per operation, advanced once per document the instructions
are applied to. In non-TTY environments (CI, pipes) no bar is created so the
labeled log lines stay clean.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress tracker for documents applied during one operation."""

    def __init__(self, total: int, *, description: str = "Applying documents") -> None:
        self.total = total
        self.description = description
        self.done = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total,
                desc=description,
                unit="doc",
                leave=True,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, **postfix: Any) -> None:
        """Mark one more document as applied."""
        self.done += 1
        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            if postfix:
                self.pbar.set_postfix(**postfix)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
