# analytics/prognostics/degradation_model.py

# Deviation the forecast treats as "order parts".
ORDER_THRESHOLD = 1.0

# Forecast target for "replace". Differs from the classifier, which
# already reports TO_REPLACE for anything above 1.0.
REPLACE_FORECAST_THRESHOLD = 1.1

# |slope| (deviation per day) below which the trend is stable.
TREND_EPSILON = 0.001

# Deviation-per-1000-counter-units above which wear is "fast".
HIGH_WEAR_RATE_PER_1000 = 0.1

# Day horizons for parts ordering / preventive planning.
ORDER_NOW_DAYS = 30
PLAN_PREVENTIVE_DAYS = 90

MIN_HISTORY = 2
