"""Behaviour core for a small desktop companion robot: face tracking, servo control, orientation, timer, photos, power and web control."""

__version__ = "0.1.0"