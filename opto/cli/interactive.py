"""
================================================================================
INTERACTIVE PORTFOLIO SESSION
================================================================================
Edit assets, move the risk-aversion setting and optimize, one command at a
time. The sampled population is kept between commands and only re-sampled
when an asset's return or risk changes.

Commands:
    show                          Asset table and current portfolio
    edit <i> <field> <value>      Edit name, expected_return or risk of asset i
    ra <value>                    Set risk aversion (1-10, step 0.1)
    optimize                      Apply the utility-maximizing portfolio
    plot [dir]                    Save population and allocation charts
    config                        Show session configuration
    help                          This list
    quit                          Leave the session
================================================================================
"""

import shlex
import sys
from pathlib import Path
from typing import Callable, List, Optional

import matplotlib
import matplotlib.pyplot as plt

from opto.core.assets import OptoError, parse_numeric
from opto.core.config import OptoConfig
from opto.core.metrics import format_ratio
from opto.core.session import OptoSession
from opto.visualization import plot_allocation, plot_population

HELP = __doc__.split("Commands:")[1].split("=" * 80)[0].rstrip()


def snap_risk_aversion(value: float) -> float:
    """Clamp to the input range and round to the slider step."""
    lo, hi = OptoConfig.RISK_AVERSION_RANGE
    step = OptoConfig.RISK_AVERSION_STEP
    clamped = min(max(value, lo), hi)
    return round(round(clamped / step) * step, 1)


class InteractiveSession:
    """
    Command interpreter around an OptoSession.

    ``execute`` takes one command line and returns the text to display, so
    the loop in ``main`` only handles reading and printing.
    """

    def __init__(self, session: Optional[OptoSession] = None):
        self.session = session if session is not None else OptoSession()
        self.finished = False

    def execute(self, line: str) -> str:
        try:
            parts = shlex.split(line)
        except ValueError as e:
            return f"Error: {e}"
        if not parts:
            return ""

        command, args = parts[0].lower(), parts[1:]
        handler: Optional[Callable[[List[str]], str]] = getattr(self, f"cmd_{command}", None)
        if handler is None:
            return f"Unknown command: {command}. Type 'help' for commands."

        try:
            return handler(args)
        except (OptoError, ValueError, IndexError) as e:
            return f"Error: {e}"

    def cmd_help(self, args: List[str]) -> str:
        return "Commands:" + HELP

    def cmd_show(self, args: List[str]) -> str:
        return self.session.summary_report()

    def cmd_config(self, args: List[str]) -> str:
        return self.session.config.summary()

    def cmd_edit(self, args: List[str]) -> str:
        if len(args) < 3:
            return "Usage: edit <index> <field> <value>"
        index = int(args[0])
        field = args[1]
        value = " ".join(args[2:])
        self.session.update_field(index, field, value)
        asset = self.session.registry[index]
        return f"{asset.name}: {field} = {getattr(asset, field)}"

    def cmd_ra(self, args: List[str]) -> str:
        if len(args) != 1:
            return f"Risk aversion: {self.session.risk_aversion:.1f}"
        snapped = snap_risk_aversion(parse_numeric(args[0], 'risk_aversion', strict=True))
        self.session.set_risk_aversion(snapped)
        return f"Risk aversion: {snapped:.1f}"

    def cmd_optimize(self, args: List[str]) -> str:
        best = self.session.optimize()
        lines = ["Optimal portfolio applied:"]
        for name, w in self.session.allocation():
            lines.append(f"  {name:<16} {w*100:>8.2f}%")
        lines.append(f"  Expected Return: {best.expected_return*100:.2f}%")
        lines.append(f"  Risk: {best.risk*100:.2f}%")
        lines.append(f"  Sharpe Ratio: {format_ratio(best.sharpe_ratio, 2)}")
        return "\n".join(lines)

    def cmd_plot(self, args: List[str]) -> str:
        output_dir = Path(args[0]) if args else Path("output")
        output_dir.mkdir(parents=True, exist_ok=True)

        plot_population(self.session, save_path=str(output_dir / "population.png"))
        plot_allocation(self.session.allocation(), save_path=str(output_dir / "allocation.png"))
        plt.close('all')
        return f"Saved population.png and allocation.png to {output_dir}"

    def cmd_quit(self, args: List[str]) -> str:
        self.finished = True
        return "Goodbye."

    cmd_exit = cmd_quit


def main():
    """Run the interactive session on stdin/stdout."""
    matplotlib.use('Agg')

    print("=" * 80)
    print("OPTO - INTERACTIVE PORTFOLIO OPTIMIZATION")
    print("=" * 80)

    strict = input("Reject malformed numbers instead of using 0? [y/N]: ").strip().lower()
    config = OptoConfig(parse_policy='strict' if strict == 'y' else 'lenient')

    interactive = InteractiveSession(OptoSession(config=config))
    print(interactive.execute("show"))
    print("Type 'help' for commands.")

    while not interactive.finished:
        try:
            line = input("\nopto> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break
        output = interactive.execute(line)
        if output:
            print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
