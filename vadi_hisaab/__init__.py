"""
Vadi Hisaab - Source Package

Farm bookkeeping core: farmers record crops, farm expenses and farm
income, and see derived totals.

DESIGN PRINCIPLES:
1. One table (the category registry) holds every per-category rule
2. Validate locally, fail early, one message at a time
3. No silent corrections
4. Stored data is locale-independent: keys, never labels
5. Every action is auditable
"""

__version__ = "1.0.0"
__author__ = "Vadi Hisaab Team"
