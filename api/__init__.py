"""JSON API exposing the analytics dashboard."""
