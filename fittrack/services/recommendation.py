"""
Daily Recommendation Service
============================
Picks today's suggested workout and meal from a fixed weekly plan.
"""

from __future__ import annotations

from datetime import date

from fittrack.models.recommendation import (
    DailyRecommendation,
    MealSuggestion,
    WorkoutSuggestion,
)

# Keyed by date.weekday(): Monday = 0 ... Sunday = 6
WEEKLY_PLAN: dict[int, DailyRecommendation] = {
    0: DailyRecommendation(
        day="Monday",
        workout=WorkoutSuggestion(name="Running", sets=1, duration_minutes=30),
        meal=MealSuggestion(
            name="Oatmeal & Berries",
            calories=350,
            description="Oats with mixed berries and almonds",
        ),
    ),
    1: DailyRecommendation(
        day="Tuesday",
        workout=WorkoutSuggestion(name="Weight Lifting", sets=4, reps=10),
        meal=MealSuggestion(
            name="Grilled Chicken & Quinoa",
            calories=500,
            description="High-protein balanced meal",
        ),
    ),
    2: DailyRecommendation(
        day="Wednesday",
        workout=WorkoutSuggestion(name="Swimming", sets=1, duration_minutes=40),
        meal=MealSuggestion(
            name="Veggie Stir Fry",
            calories=400,
            description="Tofu, broccoli, and carrots with light soy sauce",
        ),
    ),
    3: DailyRecommendation(
        day="Thursday",
        workout=WorkoutSuggestion(name="HIIT", sets=5, reps=12),
        meal=MealSuggestion(
            name="Turkey Wrap",
            calories=450,
            description="Whole grain wrap with lean turkey and veggies",
        ),
    ),
    4: DailyRecommendation(
        day="Friday",
        workout=WorkoutSuggestion(name="Cycling", sets=1, duration_minutes=45),
        meal=MealSuggestion(
            name="Smoothie Bowl",
            calories=350,
            description="Banana, spinach, and protein powder topped with granola",
        ),
    ),
    5: DailyRecommendation(
        day="Saturday",
        workout=WorkoutSuggestion(name="Yoga / Flexibility", sets=1, duration_minutes=30),
        meal=MealSuggestion(
            name="Avocado Toast & Eggs",
            calories=400,
            description="Whole grain toast with avocado and poached eggs",
        ),
    ),
    6: DailyRecommendation(
        day="Sunday",
        workout=WorkoutSuggestion(name="Rest / Light Stretching", sets=1, duration_minutes=20),
        meal=MealSuggestion(
            name="Grilled Salmon Salad",
            calories=400,
            description="Salmon with mixed greens and olive oil dressing",
        ),
    ),
}


def recommendation_for(day: date) -> DailyRecommendation:
    return WEEKLY_PLAN[day.weekday()]
