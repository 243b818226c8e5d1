# backend/app/utils/ics_export.py

from datetime import date, datetime, timedelta
from typing import Any, Dict

from icalendar import Calendar, Event as ICalEvent

from app.utils.time_utils import parse_activity_time, utc_now


EVENT_DURATION = timedelta(hours=2)


def _day_date(start_date: date, day: Dict[str, Any], position: int) -> date:
    """start_date + (dayNumber - 1), or the day's position when dayNumber is unusable."""
    try:
        number = max(int(day.get("dayNumber")), 1)
        return start_date + timedelta(days=number - 1)
    except (TypeError, ValueError, OverflowError):
        return start_date + timedelta(days=position)


def build_calendar(itinerary: Dict[str, Any], start_date: date, uid_prefix: str) -> bytes:
    """One event per activity, placed on start_date + (dayNumber - 1)."""
    destination = itinerary.get("destination") or ""

    cal = Calendar()
    cal.add("prodid", "-//TravelPlannerAI//Itinerary//EN")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "PUBLISH")
    cal.add("x-wr-calname", itinerary.get("tripTitle") or destination or "Trip")

    stamp = utc_now()
    for position, day in enumerate(itinerary.get("days") or []):
        if not isinstance(day, dict):
            continue
        day_date = _day_date(start_date, day, position)

        for index, activity in enumerate(day.get("activities") or []):
            if not isinstance(activity, dict):
                continue
            hour, minute = parse_activity_time(activity.get("time"))
            start = datetime(day_date.year, day_date.month, day_date.day, hour, minute)
            location = activity.get("location") or ""

            ev = ICalEvent()
            ev.add("uid", f"{uid_prefix}-{position + 1}-{index}@travelplanner.ai")
            ev.add("dtstamp", stamp)
            ev.add("dtstart", start)
            ev.add("dtend", start + EVENT_DURATION)
            ev.add("summary", activity.get("activity") or "Activity")
            ev.add("description", f"Activity in {destination}. Location: {location}")
            ev.add("location", f"{location}, {destination}" if destination else location)
            ev.add("status", "CONFIRMED")
            cal.add_component(ev)

    return cal.to_ical()
