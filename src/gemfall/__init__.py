from gemfall.components.board import Board, BoardSnapshot, Position
from gemfall.components.cascade import (
    CascadeStep,
    FallEvent,
    GameSnapshot,
    MatchRun,
    SwapOutcome,
    SwapRejection,
    TileSpawn,
)
from gemfall.events.bus import EventBus
from gemfall.session import GameSession

__all__ = [
    "Board",
    "BoardSnapshot",
    "CascadeStep",
    "EventBus",
    "FallEvent",
    "GameSession",
    "GameSnapshot",
    "MatchRun",
    "Position",
    "SwapOutcome",
    "SwapRejection",
    "TileSpawn",
]
