"""Errors raised by the attack resolution rules."""


class RulesError(Exception):
    """Base class for attack resolution failures."""


class InvalidInput(RulesError, ValueError):
    """Malformed die count, die size, modifier, formula or zone table."""


class NoMatchingZone(RulesError):
    """A location roll total fell outside every zone of the table."""

    def __init__(self, total: int, ranges: list[tuple[int, int]] | None = None):
        self.total = total
        self.ranges = ranges or []
        super().__init__(f"No hit zone covers location roll {total} (zones: {self.ranges})")


class MissingZoneData(RulesError):
    """The defender has no usable zone table for a location roll."""

    def __init__(self, defender: str, profile: str | None = None):
        self.defender = defender
        self.profile = profile
        super().__init__(f"No hit zone table for {defender!r} (size profile: {profile!r})")
