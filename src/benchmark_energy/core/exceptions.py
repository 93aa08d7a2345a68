class InvalidThresholds(ValueError):
    """Raised when a scenario's threshold map cannot be ordered into tiers."""


class InsufficientTiers(InvalidThresholds):
    """Raised when a threshold map has too few tiers to extrapolate energy."""

    def __init__(self, tier_count: int, required: int = 2):
        self.tier_count = tier_count
        self.required = required
        super().__init__(f"At least {required} tiers are required to compute energy, got {tier_count}")


class CatalogueError(ValueError):
    """Raised when a threshold catalogue document has the wrong shape."""
