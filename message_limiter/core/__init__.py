"""Core token counting and message limiting components."""
