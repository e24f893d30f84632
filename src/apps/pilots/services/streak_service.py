# src/apps/pilots/services/streak_service.py
from datetime import date, timedelta

from ..models import Pilot, PilotStreak


class StreakService:

    @staticmethod
    def record_flight(pilot: Pilot, flight_date: date) -> PilotStreak:
        """Extend, keep or restart the day streak for a newly approved flight."""
        streak, _ = PilotStreak.objects.select_for_update().get_or_create(pilot=pilot)
        last = streak.last_pirep_date

        if last is not None and flight_date <= last:
            # Older or same-day flight does not move the streak
            if streak.current_streak == 0:
                streak.current_streak = 1
        elif last is not None and flight_date - last == timedelta(days=1):
            streak.current_streak += 1
        else:
            streak.current_streak = 1

        if last is None or flight_date > last:
            streak.last_pirep_date = flight_date
        streak.longest_streak = max(streak.longest_streak, streak.current_streak)
        streak.save()
        return streak
