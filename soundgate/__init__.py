"""Soundgate: path-based HTTP control gateway for home-audio systems."""
