from app.services.calendar_service import generate_interview_ics


class TestInterviewCalendar:
    def _ics(self, **overrides):
        kwargs = {
            "message_id": "0f1e2d3c-aaaa-bbbb-cccc-000000000001",
            "interview_date": "2026-09-15",
            "interview_time": "14:30",
            "location": "Acme HQ, Dublin",
            "meeting_link": None,
            "notes": "Bring your portfolio",
            "company_name": "Acme Ltd",
        }
        kwargs.update(overrides)
        return generate_interview_ics(**kwargs).decode()

    def test_returns_calendar(self):
        content = self._ics()
        assert "BEGIN:VCALENDAR" in content
        assert "END:VCALENDAR" in content
        assert "BEGIN:VEVENT" in content
        assert "END:VEVENT" in content

    def test_summary_and_location(self):
        content = self._ics()
        assert "SUMMARY:Interview with Acme Ltd" in content
        assert "Acme HQ" in content
        assert "Bring your portfolio" in content

    def test_timed_event(self):
        content = self._ics()
        assert "DTSTART:20260915T143000" in content
        assert "DTEND:20260915T153000" in content

    def test_unparseable_time_is_all_day(self):
        content = self._ics(interview_time="after lunch")
        assert "DTSTART;VALUE=DATE:20260915" in content

    def test_meeting_link_used_as_location(self):
        content = self._ics(location=None, meeting_link="https://meet.example.com/abc")
        assert "LOCATION:https://meet.example.com/abc" in content

    def test_reminders(self):
        content = self._ics()
        assert content.count("BEGIN:VALARM") == 2
        assert "TRIGGER:-P1D" in content
        assert "TRIGGER:-PT1H" in content
