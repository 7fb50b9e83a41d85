"""Aggregations behind GET /api/dashboard and GET /api/water/summary.

The dashboard buckets days on the server's UTC calendar date; the water
summary buckets them in the client's timezone. A day spans
[00:00:00.000, 23:59:59.999] and every series is dense: each day in range
gets a zero-initialised bucket before events are added.
"""
from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy import func

from palm.extensions import db
from palm.models.meal import Meal
from palm.models.plan import MACROS
from palm.models.water import WaterEntry
from palm.models.workout import Workout
from palm.units import DEFAULT_DAILY_TARGET_FL_OZ, from_fluid_ounces, to_fluid_ounces
from palm.utils import utcnow, to_naive_utc

END_OF_DAY = time(23, 59, 59, 999000)
WEEK_DAYS = 7


def start_of_day(value):
    return datetime.combine(value.date(), time.min)


def end_of_day(value):
    return datetime.combine(value.date(), END_OF_DAY)


def empty_macros():
    return {macro: 0 for macro in MACROS}


def _bucket(day):
    return {'macros': empty_macros(), 'meals': 0}


def _add_meal(bucket, meal):
    for macro, used in meal.used().items():
        bucket['macros'][macro] += used or 0
    bucket['meals'] += 1


def build_weekly_data(buckets, today, plan):
    """Seven buckets ending today, or None when no plan sets the targets"""
    if plan is None:
        return None

    data = []
    used = empty_macros()
    has_full_week = True
    for offset in range(WEEK_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        bucket = buckets.get(day) or _bucket(day)
        if bucket['meals'] == 0:
            has_full_week = False
        for macro in MACROS:
            used[macro] += bucket['macros'][macro]
        data.append({
            'date_key': day.isoformat(),
            'day': f"{day:%A}",
            'day_short': f"{day:%a}",
            **bucket['macros']
        })

    slots = plan.slots()
    summary = {
        macro: {'used': used[macro], 'total': slots[macro] * WEEK_DAYS}
        for macro in MACROS
    }
    return {'data': data, 'summary': summary, 'has_full_week': has_full_week}


def build_historical_data(buckets, first_meal_at, today_start):
    """Dense series from the first meal's day through today"""
    if first_meal_at is None:
        return None

    first_day_start = start_of_day(first_meal_at)
    # Whole days between the two day starts; end-of-day comparisons drift by one
    day_count = (today_start - first_day_start).days
    today = today_start.date()

    series = {}
    for offset in range(day_count + 1):
        day = first_day_start.date() + timedelta(days=offset)
        bucket = buckets.get(day) or _bucket(day)
        series[day.isoformat()] = {
            'date_key': day.isoformat(),
            'date': f"{day:%b} {day.day}",
            'date_short': 'Today' if day == today else f"{day.month}/{day.day}",
            **bucket['macros']
        }

    return {
        'data': [series[key] for key in sorted(series)],
        'first_meal_date': first_day_start.date().isoformat()
    }


def build_workout_progress(workouts, plan):
    if plan is None:
        return []

    completed = {}
    for workout in workouts:
        for done in workout.exercises:
            completed[done.exercise_id] = completed.get(done.exercise_id, 0) + done.completed

    progress = []
    for target in plan.exercises:
        exercise = target.exercise
        progress.append({
            'exercise_id': target.exercise_id,
            'name': exercise.name if exercise else None,
            'unit': exercise.unit if exercise else None,
            'daily_target': target.daily_target,
            'completed': completed.get(target.exercise_id, 0)
        })
    return progress


def build_dashboard_data(user, now=None):
    now = now or utcnow()
    today_start = start_of_day(now)
    today_end = end_of_day(now)
    today = today_start.date()

    first_meal_at = db.session.query(func.min(Meal.date_time)).filter(
        Meal.user_id == user.id,
        Meal.date_time <= today_end
    ).scalar()

    # One read covers today, the week and the full history
    buckets = {}
    todays_meals = []
    if first_meal_at is not None:
        window_start = min(start_of_day(first_meal_at), today_start - timedelta(days=WEEK_DAYS - 1))
        meals = Meal.query.filter(
            Meal.user_id == user.id,
            Meal.date_time >= window_start,
            Meal.date_time <= today_end
        ).order_by(Meal.date_time.asc()).all()

        for meal in meals:
            day = meal.date_time.date()
            if day not in buckets:
                buckets[day] = _bucket(day)
            _add_meal(buckets[day], meal)
            if meal.date_time >= today_start:
                todays_meals.append(meal)

    todays_workouts = Workout.query.filter(
        Workout.user_id == user.id,
        Workout.date_time >= today_start,
        Workout.date_time <= today_end
    ).order_by(Workout.date_time.asc()).all()

    used_slots = buckets[today]['macros'] if today in buckets else empty_macros()
    plan = user.active_plan
    workout_plan = user.active_workout_plan

    return {
        'date': today.isoformat(),
        'used_slots': used_slots,
        'meal_plan': plan.to_dict() if plan else None,
        'workout_plan': workout_plan.to_dict() if workout_plan else None,
        'meals': [meal.to_dict() for meal in todays_meals],
        'workouts': [workout.to_dict() for workout in todays_workouts],
        'workout_progress': build_workout_progress(todays_workouts, workout_plan),
        'weekly_data': build_weekly_data(buckets, today, plan),
        'historical_data': build_historical_data(buckets, first_meal_at, today_start)
    }


def resolve_timezone(name):
    """Client timezone from the timezone cookie, falling back to UTC"""
    if not name:
        return ZoneInfo('UTC')
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo('UTC')


def local_date(tz, now=None):
    now = now or utcnow()
    return now.replace(tzinfo=timezone.utc).astimezone(tz).date()


def build_water_summary(user, tz, now=None):
    """Today's intake against the active water plan, bucketed in the client's timezone"""
    local_today = local_date(tz, now)
    week_start = local_today - timedelta(days=WEEK_DAYS - 1)
    range_start = to_naive_utc(datetime.combine(week_start, time.min, tzinfo=tz))
    range_end = to_naive_utc(datetime.combine(local_today, END_OF_DAY, tzinfo=tz))

    entries = WaterEntry.query.filter(
        WaterEntry.user_id == user.id,
        WaterEntry.date_time >= range_start,
        WaterEntry.date_time <= range_end
    ).all()

    totals = {week_start + timedelta(days=offset): 0.0 for offset in range(WEEK_DAYS)}
    for entry in entries:
        day = entry.date_time.replace(tzinfo=timezone.utc).astimezone(tz).date()
        if day in totals:
            totals[day] += to_fluid_ounces(entry.amount, entry.unit)

    plan = user.active_water_plan
    unit = plan.unit if plan else 'FLUID_OUNCES'
    target_fl_oz = to_fluid_ounces(plan.daily_target, plan.unit) if plan else DEFAULT_DAILY_TARGET_FL_OZ
    today_fl_oz = totals[local_today]
    progress = min(100, round(today_fl_oz / target_fl_oz * 100)) if target_fl_oz > 0 else 0

    return {
        'date': local_today.isoformat(),
        'timezone': tz.key,
        'unit': unit,
        'plan': plan.to_dict() if plan else None,
        'today_total': round(from_fluid_ounces(today_fl_oz, unit), 2),
        'today_total_fl_oz': round(today_fl_oz, 2),
        'daily_target': round(from_fluid_ounces(target_fl_oz, unit), 2),
        'daily_target_fl_oz': round(target_fl_oz, 2),
        'progress': progress,
        'weekly_data': [{
            'date_key': day.isoformat(),
            'day': f"{day:%A}",
            'day_short': f"{day:%a}",
            'total': round(from_fluid_ounces(total, unit), 2),
            'total_fl_oz': round(total, 2)
        } for day, total in sorted(totals.items())]
    }
