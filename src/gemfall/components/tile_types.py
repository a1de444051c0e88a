from dataclasses import dataclass, field
from typing import List

from gemfall.constants import TOKEN_PALETTE


def default_token_kinds(count: int) -> List[str]:
    """Return ``count`` kind names, palette first, then ``gem5``, ``gem6``..."""
    kinds = list(TOKEN_PALETTE[:count])
    kinds.extend(f"gem{index}" for index in range(len(kinds), count))
    return kinds


@dataclass(slots=True)
class TileTypes:
    """Singleton component listing the token kinds the board may spawn."""
    kinds: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        # Preserve order while dropping duplicates.
        seen: set[str] = set()
        filtered: List[str] = []
        for name in self.kinds:
            if name and name not in seen:
                filtered.append(name)
                seen.add(name)
        self.kinds = filtered

    def spawnable_types(self) -> List[str]:
        return list(self.kinds)

    def __len__(self) -> int:
        return len(self.kinds)
