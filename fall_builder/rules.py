from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fall_builder.constants import BASE_TYPES, UNKNOWN_TYPE_RANK


@dataclass(frozen=True)
class RuleSet:
    """
    Force composition rules for one game configuration.

    Every rule set has Leader, Core and Special plus one fourth type. The
    fourth type either adds weight to the Core requirement (core_weights)
    or is capped by the points limit (cap_points_per_slot), or both.
    """
    name: str
    label: str
    fourth_type: str
    core_weights: Dict[str, int] = field(default_factory=dict)
    cap_points_per_slot: Optional[int] = None
    required_leaders: int = 1

    @property
    def types(self) -> List[str]:
        return BASE_TYPES + [self.fourth_type]

    @property
    def is_capped(self) -> bool:
        return bool(self.cap_points_per_slot)

    def type_rank(self, unit_type: str) -> int:
        types = self.types
        return types.index(unit_type) if unit_type in types else UNKNOWN_TYPE_RANK

    def cap_for(self, points_limit: int) -> Optional[int]:
        if not self.is_capped:
            return None
        return points_limit // self.cap_points_per_slot

    def required_core(self, counts: Dict[str, int]) -> int:
        return sum(weight * counts.get(t, 0) for t, weight in self.core_weights.items())

    def describe(self) -> str:
        parts = [f"exactly {self.required_leaders} Leader"]
        if self.core_weights:
            covered = ", ".join(f"{t} ({w})" for t, w in self.core_weights.items())
            parts.append(f"Core must cover {covered}")
        if self.is_capped:
            parts.append(f"max 1 {self.fourth_type} per {self.cap_points_per_slot} pts")
        return "Force rules: " + "; ".join(parts) + "."


CHAMPION_CAP_RULES = RuleSet(
    name="champion_cap",
    label="Champion cap",
    fourth_type="Champion",
    core_weights={"Special": 1},
    cap_points_per_slot=250,
)

ELITE_WEIGHT_RULES = RuleSet(
    name="elite_weight",
    label="Elite weight",
    fourth_type="Elite",
    core_weights={"Special": 1, "Elite": 2},
)

RULE_SETS = {r.name: r for r in (CHAMPION_CAP_RULES, ELITE_WEIGHT_RULES)}


def get_rule_set(name: str) -> RuleSet:
    try:
        return RULE_SETS[name]
    except KeyError:
        raise KeyError(f"Unknown rule set '{name}'. Choose from: {', '.join(sorted(RULE_SETS))}") from None
