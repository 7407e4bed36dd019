"""Constants and defaults.

Note: Keep thresholds here to avoid magic numbers spread across the analyzers.
"""

# Risk tiers (percent, lower bound inclusive)
RISK_NONE_MIN_RATE = 90.0
RISK_LOW_MIN_RATE = 85.0
RISK_MEDIUM_MIN_RATE = 75.0

RISK_COLORS = {
    "none": "#10b981",
    "low": "#3b82f6",
    "medium": "#f59e0b",
    "high": "#ef4444",
}

RISK_LABELS = {
    "none": "No Risk",
    "low": "Low Risk",
    "medium": "Medium Risk",
    "high": "High Risk",
}

RISK_BG_COLORS = {
    "none": "#d1fae5",
    "low": "#dbeafe",
    "medium": "#fef3c7",
    "high": "#fee2e2",
}

# status -> (label, color, background)
STATUS_STYLES = {
    "PRESENT": ("Present", "#10b981", "#d1fae5"),
    "LATE": ("Late", "#f59e0b", "#fef3c7"),
    "ABSENT": ("Absent", "#ef4444", "#fee2e2"),
    "EXCUSED": ("Excused", "#8b5cf6", "#ede9fe"),
}

# Department trend is measured against the dashboard target rate.
DEPARTMENT_TARGET_RATE = 85.0
DEPARTMENT_TREND_DOWN_BELOW = 75.0

# Streaks use a fraction, not a percentage.
GOOD_DAY_MIN_RATIO = 0.85

PATTERN_DEFAULT_DAYS = 30
PEAK_DAY_TOLERANCE = 0.05
PEAK_HOUR_TOLERANCE = 0.10

DEFAULT_CACHE_SECONDS = 300
DEFAULT_CACHE_ENTRIES = 256
RATE_DECIMALS = 2

# Reports (trends, comparisons, rankings)
DEFAULT_REPORT_LIMIT = 10
MAX_REPORT_LIMIT = 100
RANKING_MIN_EVENTS = 5

# (goal, target rate, color)
ATTENDANCE_GOALS = (
    ("Perfect Attendance", 100, "#10b981"),
    ("Excellent (95%+)", 95, "#059669"),
    ("Good (90%+)", 90, "#0d9488"),
    ("Satisfactory (85%+)", 85, "#0891b2"),
    ("Needs Improvement (80%+)", 80, "#f59e0b"),
)

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
