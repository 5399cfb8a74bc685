from datetime import datetime, timedelta
from icalendar import Calendar, Event, Alarm

DEFAULT_DURATION = timedelta(hours=1)


def _parse_start(interview_date: str, interview_time: str | None):
    if interview_time:
        for fmt in ("%H:%M", "%H:%M:%S", "%I:%M %p"):
            try:
                t = datetime.strptime(interview_time.strip(), fmt).time()
            except ValueError:
                continue
            return datetime.combine(datetime.strptime(interview_date, "%Y-%m-%d").date(), t)
    # Unparseable or missing time: all-day event
    return datetime.strptime(interview_date, "%Y-%m-%d").date()


def generate_interview_ics(message_id: str, interview_date: str, interview_time: str | None,
                           location: str | None, meeting_link: str | None,
                           notes: str | None, company_name: str | None = None) -> bytes:
    cal = Calendar()
    cal.add("prodid", "-//JobBoard//EN")
    cal.add("version", "2.0")

    event = Event()
    event.add("uid", f"interview-{message_id}@jobboard")
    summary = "Interview"
    if company_name:
        summary += f" with {company_name}"
    event.add("summary", summary)

    start = _parse_start(interview_date, interview_time)
    event.add("dtstart", start)
    if isinstance(start, datetime):
        event.add("dtend", start + DEFAULT_DURATION)
    else:
        event.add("dtend", start)

    if location:
        event.add("location", location)
    elif meeting_link:
        event.add("location", meeting_link)

    description_parts = []
    if meeting_link:
        description_parts.append(f"Meeting link: {meeting_link}")
    if notes:
        description_parts.append(f"Notes: {notes}")
    if description_parts:
        event.add("description", "\n".join(description_parts))

    # Reminders: 1 day, 1 hour
    for delta in [timedelta(days=1), timedelta(hours=1)]:
        alarm = Alarm()
        alarm.add("action", "DISPLAY")
        alarm.add("trigger", -delta)
        alarm.add("description", f"Reminder: {summary}")
        event.add_component(alarm)

    cal.add_component(event)
    return cal.to_ical()
