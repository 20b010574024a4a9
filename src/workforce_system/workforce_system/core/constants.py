"""Constants and defaults shared by the calculators and services."""

DEFAULT_DEVIATION_THRESHOLD_MINUTES = 5
DEFAULT_MARGIN_MINUTES = 5
DEFAULT_CONTRACTED_HOURS_PER_WEEK = 37.5
WEEKS_PER_MONTH = 4.33
