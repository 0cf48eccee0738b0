"""Domain layer - machines, maintenance alarms and the Result protocol."""
