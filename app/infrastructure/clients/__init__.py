"""Vendor and AWS clients used by the notification engine."""
