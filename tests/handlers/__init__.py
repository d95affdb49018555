"""Shortcode handlers used by the test suite."""
