"""Pool configuration

Defaults come from constants.py. Values may be overridden from a mapping
or from LENDING_* environment variables. Rates accept either integer wads
or decimal strings ("0.9" for 90%).
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from .constants import DEFAULT_ASSET_DECIMALS, WAD
from .errors import InvalidParameter
from .state.rate_params import RateModelParams

logger = logging.getLogger(__name__)

ENV_PREFIX = "LENDING_"

RATE_FIELDS = (
    "optimal_utilization",
    "slope_1",
    "slope_2",
    "max_borrow_rate",
    "performance_fee",
)


def parse_wad(value: Any, name: str = "value") -> int:
    """Convert an int, Decimal or numeric string to a wad integer.

    Integers are taken as already wad scaled. Anything else is a plain
    fraction and is scaled by WAD; it must land on a whole wad.
    """
    if isinstance(value, bool):
        raise InvalidParameter(f"{name}: booleans are not rates")
    if isinstance(value, int):
        return value
    try:
        scaled = Decimal(str(value).strip()) * WAD
    except InvalidOperation as exc:
        raise InvalidParameter(f"{name}: cannot parse {value!r}") from exc
    if scaled != scaled.to_integral_value():
        raise InvalidParameter(f"{name}: {value!r} is finer than 1e-18")
    return int(scaled)


@dataclass(frozen=True)
class PoolConfig:
    rate_params: RateModelParams = field(default_factory=RateModelParams)
    fee_recipient: str = "treasury"
    asset_decimals: int = DEFAULT_ASSET_DECIMALS

    def __post_init__(self):
        if not self.fee_recipient:
            raise InvalidParameter("fee_recipient cannot be empty")
        if not 0 <= self.asset_decimals <= 36:
            raise InvalidParameter(f"asset_decimals out of range: {self.asset_decimals}")

    @property
    def unit(self) -> int:
        """One whole unit of the underlying, in native units"""
        return 10 ** self.asset_decimals

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "PoolConfig":
        """Build a config from a flat mapping; unknown keys are rejected"""
        known = set(RATE_FIELDS) | {"fee_recipient", "asset_decimals"}
        unknown = set(values) - known
        if unknown:
            raise InvalidParameter(f"Unknown config keys: {sorted(unknown)}")

        rate_overrides = {
            name: parse_wad(values[name], name) for name in RATE_FIELDS if name in values
        }
        kwargs = {"rate_params": RateModelParams(**rate_overrides)}
        if "fee_recipient" in values:
            kwargs["fee_recipient"] = str(values["fee_recipient"])
        if "asset_decimals" in values:
            try:
                kwargs["asset_decimals"] = int(values["asset_decimals"])
            except (TypeError, ValueError) as exc:
                raise InvalidParameter(f"asset_decimals: cannot parse {values['asset_decimals']!r}") from exc
        return cls(**kwargs)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PoolConfig":
        """Read LENDING_<FIELD> variables, e.g. LENDING_OPTIMAL_UTILIZATION=0.8"""
        environ = os.environ if environ is None else environ
        values = {}
        for key, raw in environ.items():
            if not key.startswith(ENV_PREFIX):
                continue
            name = key[len(ENV_PREFIX):].lower()
            value = raw.strip()
            if not value:
                continue
            values[name] = value
        if values:
            logger.info(
                "Pool config overrides from environment: %s",
                ", ".join(sorted(values)),
                extra={"event": "config.env_overrides", "keys": sorted(values)},
            )
        return cls.from_mapping(values)
