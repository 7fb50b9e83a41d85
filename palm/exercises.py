EXERCISE_CATEGORIES = {
    'LOWER_BODY_GLUTES': 'Lower Body & Glutes',
    'UPPER_BODY_CORE': 'Upper Body & Core',
    'FULL_BODY_CARDIO': 'Full Body & Cardio',
}

# Seeded on first listing; rows with no owner are shared by every user
PREDEFINED_EXERCISES = [
    # Lower Body & Glutes
    {'name': 'Squats', 'category': 'LOWER_BODY_GLUTES', 'unit': 'reps'},
    {'name': 'Lunges', 'category': 'LOWER_BODY_GLUTES', 'unit': 'reps'},
    {'name': 'Glute Bridges', 'category': 'LOWER_BODY_GLUTES', 'unit': 'reps'},
    {'name': 'Step-ups', 'category': 'LOWER_BODY_GLUTES', 'unit': 'reps'},
    {'name': 'Single-Leg Deadlifts', 'category': 'LOWER_BODY_GLUTES', 'unit': 'reps'},

    # Upper Body & Core
    {'name': 'Push-ups', 'category': 'UPPER_BODY_CORE', 'unit': 'reps'},
    {'name': 'Pull-ups', 'category': 'UPPER_BODY_CORE', 'unit': 'reps'},
    {'name': 'Plank', 'category': 'UPPER_BODY_CORE', 'unit': 'seconds'},
    {'name': 'Dips', 'category': 'UPPER_BODY_CORE', 'unit': 'reps'},
    {'name': 'Superman', 'category': 'UPPER_BODY_CORE', 'unit': 'reps'},

    # Full Body & Cardio
    {'name': 'Burpees', 'category': 'FULL_BODY_CARDIO', 'unit': 'reps'},
    {'name': 'Mountain Climbers', 'category': 'FULL_BODY_CARDIO', 'unit': 'reps'},
    {'name': 'Jumping Jacks', 'category': 'FULL_BODY_CARDIO', 'unit': 'reps'},
    {'name': 'Bear Crawls', 'category': 'FULL_BODY_CARDIO', 'unit': 'meters'},
]
