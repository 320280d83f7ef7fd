"""Free-text location normalization.

Rules are checked in order and the first keyword contained in the
lower-cased text wins. No fuzzy matching.
"""

from weekplanner.planning.types import Place

LOCATION_RULES: tuple[tuple[str, Place], ...] = (
    ("kfar saba", Place.PARTNER_HOME),
    ("beit dagan", Place.HOME),
    ("rishon", Place.WORK),
    ("nir tzvi", Place.TENNIS),
    ("tennis", Place.TENNIS),
)

# Places within a short drive of home
NEAR_HOME_PLACES: frozenset[Place] = frozenset({Place.HOME, Place.WORK, Place.TENNIS})
PARTNER_PLACES: frozenset[Place] = frozenset({Place.PARTNER_HOME})


def resolve_location(text: str | None) -> Place:
    """Resolve free text to a canonical place.

    Args:
        text: Location text, possibly a full address

    Returns:
        Matching Place, or Place.UNRESOLVED when no rule matches
    """
    if not text:
        return Place.UNRESOLVED
    lowered = text.lower()
    for keyword, place in LOCATION_RULES:
        if keyword in lowered:
            return place
    return Place.UNRESOLVED


def is_near_home(text: str | None) -> bool:
    return resolve_location(text) in NEAR_HOME_PLACES


def is_near_partner(text: str | None) -> bool:
    return resolve_location(text) in PARTNER_PLACES
