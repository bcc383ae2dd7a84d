"""
Risk Aversion Sweep
Four assets: Stock A, Stock B, Bond C, Real Estate D
Risk-free rate: 2%

Samples one population and shows how the chosen portfolio moves toward
lower risk as the risk-aversion coefficient rises from 1 to 10.
"""

from pathlib import Path

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from opto import OptoConfig, OptoSession
from opto.core.loader import load_assets
from opto.core.optimizer import optimize
from opto.visualization import plot_population

# Get the project root directory (parent of examples/)
PROJECT_ROOT = Path(__file__).parent.parent
OUTPUT_DIR = PROJECT_ROOT / 'output'
OUTPUT_DIR.mkdir(exist_ok=True)

registry = load_assets(Path(__file__).parent / 'assets.csv')
session = OptoSession(registry, OptoConfig(seed=42))
population = session.population

print(f"{'A':>5} {'Return':>9} {'Risk':>9} {'Sharpe':>8}   Weights")
print("-" * 70)
for a in [1, 2, 4, 6, 8, 10]:
    best = optimize(population, a)
    weights = "  ".join(f"{w*100:5.1f}%" for w in best.weights)
    print(f"{a:>5} {best.expected_return*100:>8.2f}% {best.risk*100:>8.2f}% "
          f"{best.sharpe_ratio:>8.3f}   {weights}")

session.set_risk_aversion(4)
session.optimize()
plot_population(session, save_path=str(OUTPUT_DIR / 'risk_aversion_sweep.png'),
                title='Sampled Portfolios (A = 4)')
plt.close('all')
print(f"\nSaved: {OUTPUT_DIR / 'risk_aversion_sweep.png'}")
