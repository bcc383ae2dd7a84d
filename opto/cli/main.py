"""
Main Runner Script for Portfolio Sampling
=========================================

This script runs the full workflow on one asset table:
1. Loading assets (CSV/Excel, or the built-in four-asset portfolio)
2. Sampling a population of random portfolios
3. Scoring candidates (return, risk, Sharpe ratio)
4. Selecting the utility-maximizing portfolio and applying it
5. Visualizing results and exporting the population

Usage:
    opto-analyze                          # Run with the default assets
    opto-analyze --file assets.csv        # Run with a custom asset table
    opto-analyze --risk-aversion 5        # Penalise risk more heavily
    opto-analyze --strict                 # Reject malformed numeric cells
"""

import sys
import argparse
import logging
from datetime import datetime
from typing import Dict, Optional
from pathlib import Path

import matplotlib
import matplotlib.pyplot as plt

from opto.core.assets import AssetRegistry
from opto.core.config import OptoConfig
from opto.core.loader import AssetLoader, save_population_csv
from opto.core.metrics import format_ratio
from opto.core.session import OptoSession
from opto.visualization import plot_allocation, plot_population, plot_weights


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logger(script_name: str = "opto", log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Sets up a logger that writes to both file and console.

    Args:
        script_name: Name of the script (used in log filename)
        log_dir: Directory for log files (default: <package root>/logs)

    Returns:
        Configured logger instance
    """
    if log_dir is None:
        log_dir = Path(__file__).parent.parent.parent / "logs"
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y_%m_%d_%H%M")
    log_filename = log_dir / f"log_{script_name}_{timestamp}.txt"

    logger = logging.getLogger(script_name)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    # Prevent duplicate handlers on repeated setup
    if logger.hasHandlers():
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.FileHandler(log_filename, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


# =============================================================================
# ANALYSIS CHECKPOINTS
# =============================================================================

class AnalysisCheckpoint:
    """
    Times each step of an analysis run and logs a closing summary.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.durations: Dict[str, float] = {}
        self._started: Dict[str, datetime] = {}
        self.start_time = datetime.now()

    def start_step(self, step_name: str):
        self._started[step_name] = datetime.now()
        self.logger.info(f"[CHECKPOINT] Starting: {step_name}")

    def complete_step(self, step_name: str):
        started = self._started.pop(step_name, self.start_time)
        self.durations[step_name] = (datetime.now() - started).total_seconds()
        self.logger.info(f"[CHECKPOINT] Completed: {step_name}")

    def log_final_report(self):
        """Log each completed step with its duration, then the total."""
        elapsed = (datetime.now() - self.start_time).total_seconds()
        self.logger.info("=" * 60)
        self.logger.info("  ANALYSIS COMPLETE")
        self.logger.info("=" * 60)
        for name, seconds in self.durations.items():
            self.logger.info(f"  {name:<24} {seconds:>8.2f}s")
        self.logger.info(f"  Total time: {elapsed:.2f} seconds")
        self.logger.info("=" * 60)


# =============================================================================
# MAIN ANALYSIS FUNCTIONS
# =============================================================================

def get_output_dir() -> Path:
    """Get the output directory path."""
    output_dir = Path(__file__).parent.parent.parent / "output"
    output_dir.mkdir(exist_ok=True)
    return output_dir


def run_analysis(
    registry: AssetRegistry,
    config: OptoConfig,
    save_plots: bool = True,
    save_csv: bool = True,
    output_dir: Optional[str] = None,
    logger: Optional[logging.Logger] = None
) -> dict:
    """
    Run the complete sample-and-optimize workflow.

    Args:
        registry: Assets to analyze
        config: Session assumptions
        save_plots: If True, save plots to files
        save_csv: If True, export the sampled population to CSV
        output_dir: Directory for output files
        logger: Logger instance

    Returns:
        Dictionary containing the session, the winning candidate and output paths
    """
    if logger is None:
        logger = setup_logger()

    if output_dir is None:
        output_dir = get_output_dir()
    else:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

    checkpoint = AnalysisCheckpoint(logger)
    session = OptoSession(registry, config, logger=logger)
    results = {'session': session, 'files': []}

    logger.info("=" * 70)
    logger.info("  SAMPLED MEAN-VARIANCE ANALYSIS")
    logger.info("=" * 70)
    logger.info(f"  Assets: {', '.join(registry.names)}")
    logger.info(f"  Risk-free rate: {config.risk_free_rate*100:.2f}%")
    logger.info(f"  Risk aversion: {session.risk_aversion:.1f}")
    logger.info(f"  Population size: {config.population_size}")
    logger.info("=" * 70)

    # Step 1: Current portfolio
    checkpoint.start_step("Current Portfolio")
    ret, risk = session.current_metrics()
    logger.info(f"{'Asset':<16} {'Return':>10} {'Risk':>10} {'Weight':>10}")
    logger.info("-" * 50)
    for a in registry:
        logger.info(f"{a.name:<16} {a.expected_return*100:>9.2f}% "
                    f"{a.risk*100:>9.2f}% {a.weight*100:>9.2f}%")
    logger.info(f"Current: return={ret*100:.4f}%, risk={risk*100:.4f}%")
    results['initial'] = {'return': ret, 'risk': risk}
    checkpoint.complete_step("Current Portfolio")

    # Step 2: Sample and score
    checkpoint.start_step("Sample Population")
    population = session.population
    frontier = session.frontier()
    logger.info(f"Approximate efficient frontier: {len(frontier)} of {len(population)} portfolios")
    checkpoint.complete_step("Sample Population")

    # Step 3: Optimize and apply
    checkpoint.start_step("Optimize Portfolio")
    best = session.optimize()
    results['best'] = best

    logger.info("\n--- Optimal Portfolio ---")
    logger.info("Weights:")
    for name, w in session.allocation():
        logger.info(f"  {name}: {w*100:>8.2f}%")
    logger.info(f"Expected Return: {best.expected_return*100:.4f}%")
    logger.info(f"Risk: {best.risk*100:.4f}%")
    logger.info(f"Sharpe Ratio: {format_ratio(best.sharpe_ratio)}")
    checkpoint.complete_step("Optimize Portfolio")

    # Step 4: Outputs
    if save_csv:
        checkpoint.start_step("Export Population")
        csv_path = save_population_csv(population, output_dir / "population.csv", registry.names)
        results['files'].append(csv_path)
        logger.info(f"Saved: {csv_path.name}")
        checkpoint.complete_step("Export Population")

    if save_plots:
        checkpoint.start_step("Generate Plots")

        plot_population(session, save_path=str(output_dir / "population.png"))
        results['files'].append(output_dir / "population.png")
        logger.info("Saved: population.png")

        plot_allocation(session.allocation(), save_path=str(output_dir / "allocation.png"))
        results['files'].append(output_dir / "allocation.png")
        logger.info("Saved: allocation.png")

        plot_weights(best.weights, registry.names, title="Optimal Portfolio Weights",
                     save_path=str(output_dir / "optimal_weights.png"))
        results['files'].append(output_dir / "optimal_weights.png")
        logger.info("Saved: optimal_weights.png")

        checkpoint.complete_step("Generate Plots")

    checkpoint.log_final_report()
    return results


def risk_aversion_arg(value: str) -> float:
    """argparse type: risk aversion within the input control's range."""
    try:
        parsed = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid risk aversion: {value!r}") from None
    lo, hi = OptoConfig.RISK_AVERSION_RANGE
    if not lo <= parsed <= hi:
        raise argparse.ArgumentTypeError(f"risk aversion must be between {lo:g} and {hi:g}")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Sampled Mean-Variance Portfolio Analysis',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  opto-analyze                                  # Default four-asset portfolio
  opto-analyze --file assets.csv                # Analyze an asset table
  opto-analyze --file assets.xlsx --sheet Assets
  opto-analyze --risk-aversion 8 --seed 42
        """
    )

    parser.add_argument('--file', '-f', type=str,
                        help='Path to CSV/Excel asset table (name, expected_return, risk, weight)')
    parser.add_argument('--sheet', '-s', type=str, default=None,
                        help='Sheet name for Excel files (default: first sheet)')
    parser.add_argument('--risk-aversion', '-a', type=risk_aversion_arg, default=2.0,
                        help='Risk aversion coefficient, 1-10 (default: 2)')
    parser.add_argument('--population-size', '-n', type=int, default=1000,
                        help='Number of random portfolios (default: 1000)')
    parser.add_argument('--rf-rate', '-r', type=float, default=0.02,
                        help='Risk-free rate for Sharpe ratios (default: 0.02)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducible sampling')
    parser.add_argument('--strict', action='store_true',
                        help='Reject malformed numeric values instead of using 0')
    parser.add_argument('--output-dir', '-o', type=str, default=None,
                        help='Directory for plots and CSV (default: ./output)')
    parser.add_argument('--log-dir', type=str, default=None,
                        help='Directory for log files (default: ./logs)')
    parser.add_argument('--no-plots', action='store_true',
                        help='Disable plot generation')
    parser.add_argument('--no-csv', action='store_true',
                        help='Do not export the sampled population')
    parser.add_argument('--show-plots', action='store_true',
                        help='Show plots interactively (default: just save)')
    return parser


def main(argv=None):
    """Main entry point for the portfolio analysis script."""
    args = build_parser().parse_args(argv)

    logger = setup_logger("portfolio_analysis", args.log_dir)

    try:
        config = OptoConfig(
            risk_free_rate=args.rf_rate,
            population_size=args.population_size,
            risk_aversion=args.risk_aversion,
            parse_policy='strict' if args.strict else 'lenient',
            seed=args.seed
        )

        if args.file:
            logger.info(f"Loading assets from: {args.file}")
            loader = AssetLoader(strict=config.strict)
            registry = loader.load_file(args.file, args.sheet)

            validation = loader.validate_assets(registry)
            if not validation['is_valid']:
                for error in validation['errors']:
                    logger.error(error)
                raise ValueError("Asset validation failed")
            for warning in validation['warnings']:
                logger.warning(warning)
        else:
            logger.info("No file specified. Using default assets...")
            registry = AssetRegistry(strict=config.strict)

        if not args.show_plots:
            matplotlib.use('Agg')

        run_analysis(
            registry,
            config,
            save_plots=not args.no_plots,
            save_csv=not args.no_csv,
            output_dir=args.output_dir,
            logger=logger
        )

        if args.show_plots:
            plt.show()
        plt.close('all')

        logger.info("Analysis completed successfully!")
        return 0

    except Exception as e:
        logger.error(f"Analysis failed: {e}")
        import traceback
        logger.error(traceback.format_exc())
        return 1


if __name__ == "__main__":
    sys.exit(main())
