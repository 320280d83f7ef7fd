"""Tests for the narration context payload and conversation starters."""

import json
from datetime import date

from weekplanner.planning.travel_time import TravelMatrix
from weekplanner.planning.types import Place
from weekplanner.planning.week_planner import build_week_plan
from weekplanner.summarizer.context import build_week_context, conversation_starters
from weekplanner.summarizer.prompts import CONVERSATION_STARTERS, build_summary_prompt

WEEK_START = date(2024, 1, 14)


class TestBuildWeekContext:
    def test_sections(self, make_event, preferences):
        """Test the payload shape."""
        events = [
            make_event("Work", "2024-01-15 13:00", "2024-01-15 15:00", "Beit Dagan"),
            make_event("Dinner", "2024-01-15 16:30", None, "Kfar Saba"),
        ]
        plan = build_week_plan(WEEK_START, events, preferences)

        context = build_week_context(plan, preferences)

        assert set(context) == {"week_overview", "user_preferences", "public_transport"}
        overview = context["week_overview"]
        assert overview["week_of"] == "2024-01-14"
        assert len(overview["daily_plans"]) == 7

        monday = overview["daily_plans"][1]
        assert monday["day_name"] == "Mon, Jan 15"
        assert [event["time"] for event in monday["events"]] == ["13:00", "16:30"]
        assert monday["events"][1]["duration"] == 0
        assert monday["travel_times"][0]["departure"] == "15:15"
        assert monday["travel_times"][0]["is_rush_hour"] is True
        assert monday["rush_hour_conflicts"] == [{"from": "Work", "to": "Dinner", "departure": "15:15"}]
        assert monday["current_sleep_suggestion"] == "Beit Dagan"

        assert context["user_preferences"]["max_weekly_driving"] == 900

    def test_is_json_serializable(self, make_event, preferences):
        """Test the payload can be embedded in a prompt."""
        plan = build_week_plan(WEEK_START, [make_event("Work", "2024-01-15 09:00", "2024-01-15 17:00", "Rishon")], preferences)

        prompt = build_summary_prompt(build_week_context(plan, preferences), "Where should I sleep?")

        assert json.dumps(build_week_context(plan, preferences))
        assert prompt.endswith("Where should I sleep?")

    def test_failed_day(self, make_event, preferences):
        """Test failed days are reported with their error."""
        events = [make_event("Broken", "2024-01-16 12:00", "2024-01-16 11:00")]
        plan = build_week_plan(WEEK_START, events, preferences)

        tuesday = build_week_context(plan, preferences)["week_overview"]["daily_plans"][2]

        assert tuesday["status"] == "failed"
        assert "before it starts" in tuesday["error"]


class TestConversationStarters:
    def test_static_starters(self):
        """Test the static list without a plan."""
        assert conversation_starters(None) == list(CONVERSATION_STARTERS)

    def test_dynamic_starters_first(self, make_event, preferences):
        """Test heavy weeks and rush conflicts add starters, capped at five."""
        matrix = TravelMatrix(
            normal={(Place.HOME, Place.PARTNER_HOME): 200, (Place.PARTNER_HOME, Place.HOME): 200},
            rush={},
        )
        events = [
            make_event("Work", "2024-01-15 09:00", "2024-01-15 11:00", "Beit Dagan"),
            make_event("Lunch", "2024-01-15 12:30", "2024-01-15 13:30", "Kfar Saba"),
            make_event("Dinner", "2024-01-15 20:00", "2024-01-15 21:00", "Beit Dagan"),
        ]
        plan = build_week_plan(WEEK_START, events, preferences, matrix)

        starters = conversation_starters(plan)

        assert len(starters) == 5
        assert starters[0] == "This looks like a heavy driving week - how can I optimize it?"
        assert starters[1] == "I have rush hour conflicts - what are my best options?"

    def test_quiet_week(self, preferences):
        """Test an empty week only gets static starters."""
        plan = build_week_plan(WEEK_START, [], preferences)

        assert conversation_starters(plan) == list(CONVERSATION_STARTERS)
