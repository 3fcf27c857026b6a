"""Widgets for the single student-list screen and its add/update dialog."""
