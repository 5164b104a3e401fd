from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .types import BasicJumpError, ProgramLine


class LineIndex:
    """Line number -> position in ascending program order. Exact matches only."""

    def __init__(self, lines: Iterable[ProgramLine]):
        self.lines: List[ProgramLine] = sorted(lines, key=lambda line: line.number)
        self.positions: Dict[int, int] = {
            line.number: idx for idx, line in enumerate(self.lines)
        }

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, idx: int) -> ProgramLine:
        return self.lines[idx]

    def get(self, number: float) -> Optional[int]:
        if isinstance(number, float) and not number.is_integer():
            return None
        return self.positions.get(int(number))

    def resolve(self, number: float, statement: str, column: Optional[int] = None) -> int:
        idx = self.get(number)
        if idx is None:
            raise BasicJumpError(f"Invalid target line for {statement}", column=column)
        return idx
