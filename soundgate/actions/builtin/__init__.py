"""Handlers shipped with the gateway."""
