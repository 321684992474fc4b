import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from fall_builder.catalog import Faction, UnitDefinition
from fall_builder.constants import DEFAULT_POINTS_LIMIT, SEVERITY_DANGER, SEVERITY_OK, SEVERITY_WARN
from fall_builder.rules import ELITE_WEIGHT_RULES, RuleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RosterEntry:
    id: int
    name: str
    points: int
    type: str


@dataclass(frozen=True)
class Status:
    severity: str
    message: str


@dataclass(frozen=True)
class AddResult:
    """Outcome of an add: the new entry, or None with an optional warning."""
    entry: Optional[RosterEntry] = None
    status: Optional[Status] = None

    @property
    def added(self) -> bool:
        return self.entry is not None


@dataclass(frozen=True)
class Composition:
    leaders: int
    core: int
    special: int
    fourth: int
    unknown: int
    required_core: int
    fourth_type: str
    cap: Optional[int] = None
    required_leaders: int = 1

    @property
    def total(self) -> int:
        return self.leaders + self.core + self.special + self.fourth + self.unknown


def compute_composition(entries: List[RosterEntry], rules: RuleSet, points_limit: int) -> Composition:
    counts: Dict[str, int] = {t: 0 for t in rules.types}
    unknown = 0
    for e in entries:
        if e.type in counts:
            counts[e.type] += 1
        else:
            unknown += 1
    return Composition(
        leaders=counts["Leader"],
        core=counts["Core"],
        special=counts["Special"],
        fourth=counts[rules.fourth_type],
        unknown=unknown,
        required_core=rules.required_core(counts),
        fourth_type=rules.fourth_type,
        cap=rules.cap_for(points_limit),
        required_leaders=rules.required_leaders,
    )


def composition_problems(comp: Composition, rules: RuleSet, points_limit: int) -> List[str]:
    problems = []
    if comp.leaders != comp.required_leaders:
        problems.append(f"Leaders: need exactly {comp.required_leaders} (you have {comp.leaders}).")
    if comp.core < comp.required_core:
        problems.append(f"Core: need at least {comp.required_core} (you have {comp.core}).")
    if comp.cap is not None and comp.fourth > comp.cap:
        problems.append(f"{comp.fourth_type}s: max {comp.cap} at {points_limit} pts (you have {comp.fourth}).")
    return problems


def classify_status(total: int, limit: int, problems: List[str]) -> Status:
    if total == 0:
        return Status(SEVERITY_OK, "Ready.")

    joined = " ".join(problems)
    if total > limit:
        msg = f"Over by {total - limit} pts."
        return Status(SEVERITY_DANGER, f"{msg} {joined}" if problems else msg)

    remaining = limit - total
    if problems:
        return Status(SEVERITY_WARN, f"{remaining} pts remaining. {joined}")
    if remaining == 0:
        return Status(SEVERITY_OK, "Legal: exact points and legal composition.")
    return Status(SEVERITY_OK, f"{remaining} pts remaining. Legal so far.")


class Roster:
    """
    One user's roster: the selected faction, the points limit and the
    entries bought so far. Entry ids come from a counter that only resets
    on clear(), so a deleted id is never handed out again.
    """

    def __init__(self, rules: RuleSet = ELITE_WEIGHT_RULES, points_limit: int = DEFAULT_POINTS_LIMIT,
                 faction: Optional[Faction] = None):
        self.rules = rules
        self.faction = faction
        self.points_limit = DEFAULT_POINTS_LIMIT
        self.set_points_limit(points_limit)
        self.entries: List[RosterEntry] = []
        self._next_id = 1

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def faction_name(self) -> str:
        return self.faction.name if self.faction else ""

    # --- Selections ---
    def set_points_limit(self, limit: int) -> None:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ValueError(f"Points limit must be a positive integer, got {limit!r}")
        self.points_limit = limit

    def select_faction(self, faction: Optional[Faction]) -> None:
        if faction == self.faction:
            return
        self.faction = faction
        self.clear()

    # --- Mutators ---
    def add_entry(self, unit: UnitDefinition) -> AddResult:
        if not self.can_add(unit):
            cap = self.rules.cap_for(self.points_limit)
            logger.debug("Rejected %s: %s cap %d reached", unit.name, unit.type, cap)
            return AddResult(status=Status(
                SEVERITY_WARN,
                f"{unit.type} cap reached: max {cap} at {self.points_limit} pts.",
            ))

        entry = RosterEntry(id=self._next_id, name=unit.name, points=unit.points, type=unit.type)
        self._next_id += 1
        self.entries.append(entry)
        logger.debug("Added %s (#%d, %d pts)", entry.name, entry.id, entry.points)
        return AddResult(entry=entry)

    def add_unit(self, name: str) -> AddResult:
        unit = self.faction.unit(name) if self.faction else None
        if unit is None:
            return AddResult()
        return self.add_entry(unit)

    def remove_entry(self, entry_id: int) -> bool:
        before = len(self.entries)
        self.entries = [e for e in self.entries if e.id != entry_id]
        removed = len(self.entries) != before
        if removed:
            logger.debug("Removed #%d", entry_id)
        return removed

    def clear(self) -> None:
        logger.debug("Cleared roster (%d entries)", len(self.entries))
        self.entries = []
        self._next_id = 1

    # --- Queries ---
    def total_points(self) -> int:
        return sum(e.points for e in self.entries)

    def composition(self) -> Composition:
        return compute_composition(self.entries, self.rules, self.points_limit)

    def problems(self) -> List[str]:
        return composition_problems(self.composition(), self.rules, self.points_limit)

    def status(self) -> Status:
        return classify_status(self.total_points(), self.points_limit, self.problems())

    def ordered_entries(self) -> List[RosterEntry]:
        return sorted(self.entries, key=lambda e: (self.rules.type_rank(e.type), e.id))

    def can_add(self, unit: UnitDefinition) -> bool:
        cap = self.rules.cap_for(self.points_limit)
        if cap is None or unit.type != self.rules.fourth_type:
            return True
        return sum(1 for e in self.entries if e.type == unit.type) < cap
