import pytest

from fall_builder.catalog import Catalog, Faction, UnitDefinition
from fall_builder.roster import Roster
from fall_builder.rules import CHAMPION_CAP_RULES, ELITE_WEIGHT_RULES


@pytest.fixture
def elite_faction() -> Faction:
    """Faction for the elite-weight rule set."""
    return Faction(
        name="The Ashen Host",
        units=(
            UnitDefinition("Cinder Warden", 45, "Leader"),
            UnitDefinition("Ember Spears", 25, "Core"),
            UnitDefinition("Ash-Bound Levy", 20, "Core"),
            UnitDefinition("Soot Archers", 30, "Special"),
            UnitDefinition("Last Flame Guard", 50, "Elite"),
        ),
    )


@pytest.fixture
def champion_faction() -> Faction:
    """Faction for the champion-cap rule set."""
    return Faction(
        name="The Hollow Crown",
        units=(
            UnitDefinition("Pale Steward", 5, "Leader"),
            UnitDefinition("Crownless Militia", 10, "Core"),
            UnitDefinition("Oathbreaker Blades", 8, "Special"),
            UnitDefinition("The Unmourned", 55, "Champion"),
        ),
    )


@pytest.fixture
def catalog(elite_faction: Faction, champion_faction: Faction) -> Catalog:
    return Catalog(factions=(elite_faction, champion_faction))


@pytest.fixture
def elite_roster(elite_faction: Faction) -> Roster:
    return Roster(rules=ELITE_WEIGHT_RULES, points_limit=200, faction=elite_faction)


@pytest.fixture
def champion_roster(champion_faction: Faction) -> Roster:
    return Roster(rules=CHAMPION_CAP_RULES, points_limit=300, faction=champion_faction)
