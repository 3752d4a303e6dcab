"""
Wealth Manager - Indian savings and investment calculators.

Computation layer for:
- Small-savings schemes (PPF, SSY, NSC, SCSS, FD, RD, SGB)
- Market-linked instruments (SIP, NPS, Equity, ELSS, REITs, Debt funds)
- Capital-gains indexation with the Cost Inflation Index
- Multi-instrument corpus simulation and purchasing-power projection
"""

__version__ = "1.0.0"
__author__ = "Wealth Manager Contributors"
