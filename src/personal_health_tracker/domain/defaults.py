"""
Seed dataset used when storage holds nothing for a key.

The activity series covers one Monday-to-Sunday week and mirrors the step
counts plotted on the dashboard's weekly chart.
"""

from personal_health_tracker.domain.models import Activity, DailyMetrics, HealthTip

DEFAULT_WEEKLY_STEPS: tuple[int, ...] = (5000, 8000, 7500, 9000, 6500, 7000, 8500)

_DEFAULT_ACTIVITY_ROWS: tuple[tuple[str, str, float], ...] = (
    ("2024-01-01", "Morning walk", 210),
    ("2024-01-02", "Running", 420),
    ("2024-01-03", "Cycling", 380),
    ("2024-01-04", "Hiking", 510),
    ("2024-01-05", "Yoga", 250),
    ("2024-01-06", "Swimming", 330),
    ("2024-01-07", "Long walk", 400),
)

_DEFAULT_TIP_ROWS: tuple[tuple[str, str, str, str], ...] = (
    (
        "Stay Hydrated",
        "Drinking plenty of water can help boost your metabolism, clear your skin, "
        "and improve overall health.",
        "Nutrition",
        "assets/water.png",
    ),
    (
        "Regular Exercise",
        "Exercise for at least 30 minutes a day to keep your body active and maintain "
        "cardiovascular health.",
        "Exercise",
        "assets/exercise.png",
    ),
    (
        "Healthy Diet",
        "A balanced diet rich in fruits, vegetables, and lean proteins can promote "
        "weight loss and improve your health.",
        "Nutrition",
        "assets/diet.jpeg",
    ),
    (
        "Get Enough Sleep",
        "Adequate sleep is crucial for mental and physical well-being. "
        "Aim for 7-9 hours each night.",
        "Sleep",
        "assets/sleep.png",
    ),
    (
        "Mindfulness Meditation",
        "Meditating for 10 minutes a day can reduce stress and anxiety, "
        "improving overall mental health.",
        "Mental Health",
        "assets/meditation.jpg",
    ),
)


def default_activities() -> list[Activity]:
    """Return a fresh copy of the seeded weekly activity series."""
    return [
        Activity(
            id=index,
            date=day,
            steps=steps,
            exercise_description=description,
            calories_burned=calories,
        )
        for index, ((day, description, calories), steps) in enumerate(
            zip(_DEFAULT_ACTIVITY_ROWS, DEFAULT_WEEKLY_STEPS), start=1
        )
    ]


def default_tips() -> list[HealthTip]:
    """Return a fresh copy of the seeded health tips."""
    return [
        HealthTip(id=index, title=title, content=content, category=category, image=image)
        for index, (title, content, category, image) in enumerate(_DEFAULT_TIP_ROWS, start=1)
    ]


def default_daily_metrics() -> DailyMetrics:
    """Return the seeded daily metrics."""
    return DailyMetrics(steps=6500, calories_burned=500, water_liters=5)
