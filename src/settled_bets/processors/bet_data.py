"""
Normalized data structures for settled sportsbook tickets.

A Bet is one wager ticket; its legs are either plain selections or one
embedded same-game-parlay block (GroupLeg) holding plain selections.
Nesting is exactly one level deep.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import structlog

logger = structlog.get_logger(__name__)


class BetType(str, Enum):
    SINGLE = "single"
    PARLAY = "parlay"
    SGP = "sgp"
    SGP_PLUS = "sgp_plus"


class BetResult(str, Enum):
    WIN = "win"
    LOSS = "loss"
    PUSH = "push"
    PENDING = "pending"


class LegResult(str, Enum):
    WIN = "WIN"
    LOSS = "LOSS"
    PUSH = "PUSH"
    PENDING = "PENDING"
    UNKNOWN = "UNKNOWN"


SGP_MARKET = "Same Game Parlay"


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass
class Selection:
    """One selection: a player or team with a market and threshold."""
    entities: List[str] = field(default_factory=list)
    market: str = ""
    target: Optional[str] = None
    ou: Optional[str] = None
    odds: Optional[int] = None
    result: LegResult = LegResult.PENDING
    matchup: Optional[str] = None

    def __post_init__(self):
        self.entities = [e for e in (self.entities or []) if e]
        if self.target is not None:
            self.target = str(self.target).strip() or None
        if not isinstance(self.result, LegResult):
            self.result = LegResult(str(self.result).upper())

    @property
    def is_group_leg(self) -> bool:
        return False

    @property
    def entity(self) -> str:
        """First subject name, or empty string."""
        return self.entities[0] if self.entities else ""

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "entities": list(self.entities),
            "market": self.market,
            "target": self.target,
            "ou": self.ou,
            "odds": self.odds,
            "result": self.result.value,
            "isGroupLeg": False,
            "matchup": self.matchup,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Selection':
        return cls(
            entities=list(data.get("entities") or []),
            market=data.get("market", ""),
            target=data.get("target"),
            ou=data.get("ou"),
            odds=data.get("odds"),
            result=data.get("result", LegResult.PENDING),
            matchup=data.get("matchup"),
        )


@dataclass
class GroupLeg:
    """An embedded same-game-parlay block inside a multi-leg ticket."""
    children: List[Selection] = field(default_factory=list)
    market: str = SGP_MARKET
    target: Optional[str] = None
    odds: Optional[int] = None
    result: LegResult = LegResult.PENDING
    matchup: Optional[str] = None
    entities: List[str] = field(default_factory=list)

    def __post_init__(self):
        for child in self.children:
            if not isinstance(child, Selection):
                raise TypeError(
                    f"GroupLeg children must be Selection, got {type(child).__name__}"
                )
            # inner SGP odds are never shown per leg
            child.odds = None
        if not isinstance(self.result, LegResult):
            self.result = LegResult(str(self.result).upper())

    @property
    def is_group_leg(self) -> bool:
        return True

    @property
    def entity(self) -> str:
        return self.entities[0] if self.entities else ""

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "entities": list(self.entities),
            "market": self.market,
            "target": self.target,
            "odds": self.odds,
            "result": self.result.value,
            "isGroupLeg": True,
            "matchup": self.matchup,
            # children always carry an explicit null odds
            "children": [dict(c.to_dict(), odds=None) for c in self.children],
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GroupLeg':
        return cls(
            children=[Selection.from_dict(c) for c in data.get("children") or []],
            market=data.get("market", SGP_MARKET),
            target=data.get("target"),
            odds=data.get("odds"),
            result=data.get("result", LegResult.PENDING),
            matchup=data.get("matchup"),
            entities=list(data.get("entities") or []),
        )


BetLeg = Union[Selection, GroupLeg]


def leg_from_dict(data: Dict[str, Any]) -> BetLeg:
    if data.get("isGroupLeg"):
        return GroupLeg.from_dict(data)
    return Selection.from_dict(data)


@dataclass
class Bet:
    """Unified record for one settled (or pending) ticket."""

    # Identity
    book: str
    bet_id: str
    placed_at: str

    # Classification
    bet_type: BetType = BetType.SINGLE
    market_category: str = "Main Markets"

    # Economics
    odds: int = 0
    stake: float = 0.0
    payout: float = 0.0
    result: BetResult = BetResult.PENDING

    # Content
    description: str = ""
    name: Optional[str] = None
    sport: Optional[str] = None
    is_live: bool = False
    legs: List[BetLeg] = field(default_factory=list)
    raw: str = ""
    settled_at: Optional[str] = None

    # Single-bet convenience fields
    type: Optional[str] = None
    line: Optional[str] = None
    ou: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.bet_type, BetType):
            self.bet_type = BetType(str(self.bet_type))
        if not isinstance(self.result, BetResult):
            self.result = BetResult(str(self.result).lower())
        if self.settled_at is None and self.result is not BetResult.PENDING:
            self.settled_at = self.placed_at
        if self.bet_type is not BetType.SINGLE:
            # convenience fields only describe single bets
            self.type = self.line = self.ou = None
        elif len(self.legs) > 1:
            logger.warning("single bet with several legs; keeping first",
                           bet_id=self.bet_id, legs=len(self.legs))
            self.legs = self.legs[:1]

    @property
    def id(self) -> str:
        return f"{self.book}:{self.bet_id}:{self.placed_at}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a camelCase dictionary for downstream consumers."""
        return _compact({
            "id": self.id,
            "book": self.book,
            "betId": self.bet_id,
            "placedAt": self.placed_at,
            "settledAt": self.settled_at,
            "betType": self.bet_type.value,
            "marketCategory": self.market_category,
            "sport": self.sport,
            "description": self.description,
            "name": self.name,
            "odds": self.odds,
            "stake": self.stake,
            "payout": self.payout,
            "result": self.result.value,
            "type": self.type,
            "line": self.line,
            "ou": self.ou,
            "legs": [leg.to_dict() for leg in self.legs] if self.legs else None,
            "isLive": self.is_live,
            "raw": self.raw,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Bet':
        """Create a Bet from the dictionary produced by to_dict."""
        return cls(
            book=data.get("book", ""),
            bet_id=data.get("betId", ""),
            placed_at=data.get("placedAt", ""),
            bet_type=data.get("betType", BetType.SINGLE),
            market_category=data.get("marketCategory", "Main Markets"),
            odds=int(data.get("odds") or 0),
            stake=float(data.get("stake") or 0.0),
            payout=float(data.get("payout") or 0.0),
            result=data.get("result", BetResult.PENDING),
            description=data.get("description", ""),
            name=data.get("name"),
            sport=data.get("sport"),
            is_live=bool(data.get("isLive", False)),
            legs=[leg_from_dict(leg) for leg in data.get("legs") or []],
            raw=data.get("raw", ""),
            settled_at=data.get("settledAt"),
            type=data.get("type"),
            line=data.get("line"),
            ou=data.get("ou"),
        )
