"""Resource revisions and the game versions they belong to."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ResrcRevision:
    """Serialization revision of a resource."""

    head: int
    branch_id: int = 0
    branch_revision: int = 0

    @property
    def version(self) -> int:
        return self.head & 0xFFFF

    @property
    def subversion(self) -> int:
        return (self.head >> 16) & 0xFFFF

    @property
    def is_lbp1(self) -> bool:
        return self.head <= 0x272

    @property
    def is_lbp3(self) -> bool:
        return self.head >> 16 != 0

    @property
    def game_version(self) -> "GameVersion":
        if self.is_lbp1:
            return GameVersion.LBP1
        if self.is_lbp3:
            return GameVersion.LBP3
        return GameVersion.LBP2


class GameVersion(Enum):
    """A game of the series; the value is its id in the level database."""

    LBP1 = 0
    LBP2 = 1
    LBP3 = 2

    @property
    def title(self) -> str:
        return _TITLES[self]

    @property
    def short_title(self) -> str:
        return _SHORT_TITLES[self]

    @property
    def title_id(self) -> str:
        return _TITLE_IDS[self]

    @property
    def latest_revision(self) -> ResrcRevision:
        return _LATEST_REVISIONS[self]


_TITLES = {
    GameVersion.LBP1: "LittleBigPlanet™",
    GameVersion.LBP2: "LittleBigPlanet™2",
    GameVersion.LBP3: "LittleBigPlanet™3",
}

_SHORT_TITLES = {
    GameVersion.LBP1: "LBP1",
    GameVersion.LBP2: "LBP2",
    GameVersion.LBP3: "LBP3",
}

_TITLE_IDS = {
    GameVersion.LBP1: "BCES00141",
    GameVersion.LBP2: "BCES00850",
    GameVersion.LBP3: "BCES01663",
}

_LATEST_REVISIONS = {
    GameVersion.LBP1: ResrcRevision(head=0x272, branch_id=0x4C44, branch_revision=0x17),
    GameVersion.LBP2: ResrcRevision(head=0x3F8),
    GameVersion.LBP3: ResrcRevision(head=0x21803F9),
}