import logging
import numpy as np
import matplotlib.pyplot as plt
from dataclasses import dataclass, field
from typing import List, Optional
import pandas as pd
from pathlib import Path
from datetime import datetime

from lending_model.src.collaborators import (
    InMemoryAssetCustody,
    InMemoryShareToken,
    Role,
    RoleRegistry,
)
from lending_model.src.config import PoolConfig
from lending_model.src.constants import WAD, SECONDS_PER_YEAR
from lending_model.src.pool import LendingPool
from lending_model.src.rate_model import rate_curve
from lending_model.src.state.rate_params import RateModelParams

logger = logging.getLogger(__name__)

LENDER = "lender"
BORROWER = "borrower"
ADMIN = "admin"

@dataclass
class SimulationParams:
    initial_supply: int = 1_000_000        # whole units supplied at t=0
    simulation_days: int = 365
    steps_per_day: int = 24                # hourly steps
    borrow_intensity: float = 0.02         # mean share of free cash drawn per step
    repay_intensity: float = 0.015         # mean share of debt repaid per step
    flow_volatility: float = 0.01          # noise on lender deposits/withdrawals
    fee_collection_days: int = 30
    random_seed: Optional[int] = None
    experiment_name: str = "default"
    pool_config: PoolConfig = field(default_factory=PoolConfig)  # curve, fee recipient, decimals

@dataclass
class CurveConfig:
    """A named rate curve for side by side comparison"""
    name: str
    params: RateModelParams

    def __str__(self):
        p = self.params
        return (
            f"{self.name} (U={p.optimal_utilization / WAD:.2f}, "
            f"s1={p.slope_1 / WAD:.2f}, s2={p.slope_2 / WAD:.2f})"
        )

class SimulatedClock:
    def __init__(self, start: int = 0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds

class PoolSimulation:
    def __init__(self, params: SimulationParams):
        self.params = params
        self.unit = params.pool_config.unit
        self.clock = SimulatedClock()
        self.custody = InMemoryAssetCustody()
        self.share_token = InMemoryShareToken()
        self.roles = RoleRegistry()
        self.roles.grant(Role.BORROWER, BORROWER)
        self.roles.grant(Role.ADMIN, ADMIN)
        self.pool = LendingPool.from_config(
            params.pool_config,
            self.custody,
            self.share_token,
            self.roles,
            clock=self.clock,
        )
        self.rows: List[dict] = []

        if params.random_seed is not None:
            np.random.seed(params.random_seed)

        # Both sides get far more than they can ever move
        self.custody.fund(LENDER, params.initial_supply * self.unit * 10)
        self.custody.fund(BORROWER, params.initial_supply * self.unit * 10)
        self.pool.supply(LENDER, params.initial_supply * self.unit)

    def _borrower_step(self) -> None:
        draw = max(np.random.normal(self.params.borrow_intensity, self.params.flow_volatility), 0.0)
        amount = int(self.pool.available_liquidity() * draw)
        if amount >= self.unit:
            self.pool.borrow(BORROWER, amount)

        debt = self.pool.debt_of(BORROWER)
        pay = max(np.random.normal(self.params.repay_intensity, self.params.flow_volatility), 0.0)
        amount = int(debt * pay)
        if amount >= self.unit:
            self.pool.repay(BORROWER, amount)

    def _lender_step(self) -> None:
        flow = np.random.normal(0.0, self.params.flow_volatility)
        if flow > 0:
            amount = int(self.pool.total_assets() * flow)
            if amount >= self.unit:
                self.pool.supply(LENDER, amount)
            return

        held = self.share_token.balance_of(LENDER)
        total_shares = self.share_token.total_supply()
        assets = self.pool.total_assets()
        if total_shares == 0 or assets == 0:
            return
        # Never ask for more than free cash can pay
        max_shares = self.pool.available_liquidity() * total_shares // assets
        shares = min(int(held * -flow), max_shares)
        if shares >= self.unit:
            self.pool.withdraw(LENDER, shares)

    def _snapshot(self, step: int) -> dict:
        return {
            "time_days": step / self.params.steps_per_day,
            "utilization": self.pool.utilization() / WAD,
            "borrow_apr": self.pool.borrow_rate_per_second() * SECONDS_PER_YEAR / WAD,
            "supply_apr": self.pool.supply_rate_per_second() * SECONDS_PER_YEAR / WAD,
            "exchange_rate": self.pool.exchange_rate() / WAD,
            "debt_proportion_rate": self.pool.debt_proportion_rate() / WAD,
            "total_borrowed": self.pool.total_borrowed() / self.unit,
            "cash": self.custody.balance_of(self.pool.pool_account) / self.unit,
            "pending_fees": self.pool.pending_fees() / self.unit,
        }

    def simulate(self) -> pd.DataFrame:
        step_seconds = 24 * 60 * 60 // self.params.steps_per_day
        total_steps = self.params.simulation_days * self.params.steps_per_day
        collection_steps = self.params.fee_collection_days * self.params.steps_per_day

        for step in range(total_steps):
            self.clock.advance(step_seconds)
            self._borrower_step()
            self._lender_step()
            if collection_steps and step % collection_steps == collection_steps - 1:
                cash = self.custody.balance_of(self.pool.pool_account)
                if self.pool.pending_fees() <= cash:
                    self.pool.collect_fees(ADMIN)
            self.rows.append(self._snapshot(step))

        logger.info(
            "Simulated %d steps, final utilization %.4f",
            total_steps,
            self.rows[-1]["utilization"] if self.rows else 0.0,
            extra={"event": "simulation.finished", "steps": total_steps},
        )
        return self.results()

    def results(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows)

    def plot_results(self, output_dir: Optional[Path] = None) -> Path:
        output_dir = output_dir or Path('research/results') / self.params.experiment_name
        output_dir.mkdir(parents=True, exist_ok=True)
        df = self.results()

        fig, (ax1, ax2, ax3) = plt.subplots(3, 1, figsize=(12, 11))

        # Plot utilization against the kink
        ax1.plot(df["time_days"], df["utilization"] * 100, label='Utilization')
        ax1.axhline(y=self.params.pool_config.rate_params.optimal_utilization / WAD * 100, color='r', linestyle='--', alpha=0.3)
        ax1.set_ylabel('Utilization (%)')
        ax1.set_title('Pool Utilization Over Time')
        ax1.legend()
        ax1.grid(True)

        # Plot rates
        ax2.plot(df["time_days"], df["borrow_apr"] * 100, label='Borrow APR', color='orange')
        ax2.plot(df["time_days"], df["supply_apr"] * 100, label='Supply APR', color='green')
        ax2.set_ylabel('Rate (%)')
        ax2.set_title('Interest Rates Over Time')
        ax2.legend()
        ax2.grid(True)

        # Plot both proportional ledgers
        ax3.plot(df["time_days"], df["exchange_rate"], label='Exchange rate')
        ax3.plot(df["time_days"], df["debt_proportion_rate"], label='Debt proportion rate')
        ax3.set_ylabel('Underlying per unit')
        ax3.set_xlabel('Time (days)')
        ax3.set_title('Share Prices Over Time')
        ax3.legend()
        ax3.grid(True)

        plt.tight_layout()

        # Save plot with descriptive name
        p = self.params.pool_config.rate_params
        plot_name = f"optimal_{p.optimal_utilization / WAD}_slope1_{p.slope_1 / WAD}_slope2_{p.slope_2 / WAD}"
        if self.params.random_seed is not None:
            plot_name += f"_seed_{self.params.random_seed}"

        path = output_dir / f"{plot_name}.png"
        plt.savefig(path)
        plt.close()
        return path

def compare_rate_curves(curves: List[CurveConfig], output_dir: Optional[Path] = None) -> Path:
    """Plot several rate curves together against utilization"""
    output_dir = output_dir or Path('research/results/rate_curve_comparison')
    output_dir.mkdir(parents=True, exist_ok=True)

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 10))

    for curve_config in curves:
        df = rate_curve(curve_config.params)
        ax1.plot(df["utilization"] * 100, df["borrow_apr"] * 100, label=str(curve_config))
        ax2.plot(df["utilization"] * 100, df["supply_apr"] * 100, label=str(curve_config))

    ax1.set_ylabel('Borrow APR (%)')
    ax1.set_title('Borrow Rate Curve')
    ax1.legend(loc='upper left')
    ax1.grid(True, alpha=0.3)  # Lighter grid

    ax2.set_ylabel('Supply APR (%)')
    ax2.set_xlabel('Utilization (%)')
    ax2.set_title('Supply Rate Curve')
    ax2.legend(loc='upper left')
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()

    # Create unique filename with just timestamp
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = output_dir / f"rate_curves_{timestamp}.png"

    plt.savefig(path, bbox_inches='tight', dpi=300)
    plt.close()
    return path

def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    curves = [
        CurveConfig("Default", RateModelParams()),
        CurveConfig(
            "Early kink",
            RateModelParams(optimal_utilization=WAD * 80 // 100, slope_1=WAD * 8 // 100, slope_2=WAD),
        ),
        CurveConfig(
            "Gentle",
            RateModelParams(optimal_utilization=WAD * 95 // 100, slope_1=WAD * 5 // 100, slope_2=WAD * 30 // 100),
        ),
    ]
    compare_rate_curves(curves)

    params = SimulationParams(
        experiment_name="single_run",
        random_seed=57,
        simulation_days=100,
        pool_config=PoolConfig.from_env(),
    )
    sim = PoolSimulation(params)
    df = sim.simulate()
    print(df.describe().T[["mean", "min", "max"]])
    sim.plot_results()

if __name__ == "__main__":
    main()
