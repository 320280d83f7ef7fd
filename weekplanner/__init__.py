"""Week planner: travel time and sleep location advisor for a two-household week."""
