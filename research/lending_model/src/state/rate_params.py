"""Rate model parameters"""
from dataclasses import dataclass
from ..constants import (
    WAD,
    SECONDS_PER_YEAR,
    DEFAULT_OPTIMAL_UTILIZATION,
    DEFAULT_SLOPE_1,
    DEFAULT_SLOPE_2,
    DEFAULT_MAX_BORROW_RATE,
    DEFAULT_PERFORMANCE_FEE,
)
from ..errors import InvalidParameter

@dataclass(frozen=True)
class RateModelParams:
    """Kinked curve parameters, all scaled by WAD.

    slope_1 and slope_2 are annual rates, max_borrow_rate is per second.
    """
    optimal_utilization: int = DEFAULT_OPTIMAL_UTILIZATION
    slope_1: int = DEFAULT_SLOPE_1
    slope_2: int = DEFAULT_SLOPE_2
    max_borrow_rate: int = DEFAULT_MAX_BORROW_RATE
    performance_fee: int = DEFAULT_PERFORMANCE_FEE

    def __post_init__(self):
        for name in ("optimal_utilization", "slope_1", "slope_2", "max_borrow_rate", "performance_fee"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidParameter(f"{name} must be an integer wad, got {value!r}")
            if value < 0:
                raise InvalidParameter(f"{name} must be non-negative")
        # the curve divides by U below the kink and by (1 - utilization) above it
        if not 0 < self.optimal_utilization < WAD:
            raise InvalidParameter("optimal_utilization must lie strictly between 0 and 1")
        if self.performance_fee > WAD // 2:
            raise InvalidParameter(
                "performance_fee cannot exceed 50%: the fee is taken from debt growth and "
                "then paid out of cash, so lenders net interest minus twice the fee"
            )
        if self.max_borrow_rate < self.slope_1 // SECONDS_PER_YEAR:
            raise InvalidParameter(
                "max_borrow_rate cannot sit below slope_1 / SECONDS_PER_YEAR, the rate at "
                "optimal utilization, or the capped curve would fall past the kink"
            )
