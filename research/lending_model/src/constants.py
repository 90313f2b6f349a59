# Fixed point scale factors
WAD = 1_000_000_000_000_000_000  # 1e18 for rates and ratios
MAX_UINT256 = 2**256 - 1

# Time constants
SECONDS_PER_YEAR = 365 * 24 * 60 * 60  # 31_536_000

# Default rate curve (all wad)
DEFAULT_OPTIMAL_UTILIZATION = WAD * 90 // 100  # 90%
DEFAULT_SLOPE_1 = WAD * 20 // 100              # 20% APR at the kink
DEFAULT_SLOPE_2 = WAD * 60 // 100              # 60% APR steepness past the kink
DEFAULT_MAX_BORROW_RATE = WAD // SECONDS_PER_YEAR * 10  # ~1000% APR per second
DEFAULT_PERFORMANCE_FEE = WAD * 10 // 100      # 10% of interest

# Underlying asset
DEFAULT_ASSET_DECIMALS = 6

# Account the pool's custody balance is held under
POOL_ACCOUNT = "pool"
