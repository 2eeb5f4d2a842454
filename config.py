"""
Settlement configuration.

Business rules that may change over time live here as plain constants.
Amounts are integers in the smallest currency unit (cents).
"""

import os

# =================================================
# Commission
# =================================================
# Share of the rental price retained by the platform (30%).
COMMISSION_RATE = 0.30

# Half of the commission funds the insurance.
INSURANCE_PART_RATE = 0.50

# 1 euro per day goes to the roadside assistance.
ROADSIDE_ASSISTANCE_FEE_PER_DAY = 100


# =================================================
# Options
# =================================================
# Deductible reduction, billed per day and kept by the platform.
DEDUCTIBLE_REDUCTION_COST_PER_DAY = 400


# =================================================
# Decreasing prices for longer rentals
# =================================================
# Each tier is (percent off, first discounted day, number of days or None).
DISCOUNT_TIERS = (
    (10.0, 2, 3),
    (30.0, 5, 6),
    (50.0, 11, None),
)


# =================================================
# Output
# =================================================
# Name under which the platform appears in output documents.
PLATFORM_LABEL = "drivy"

OUTPUT_MODES = ("prices", "commissions", "actions", "modifications")


# =================================================
# Runtime settings
# =================================================
INPUT_PATH = os.getenv("INPUT_PATH", "data.json")
OUTPUT_PATH = os.getenv("OUTPUT_PATH", "computed_output.json")
OUTPUT_MODE = os.getenv("OUTPUT_MODE", "actions")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
