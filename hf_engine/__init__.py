"""Health-factor engine for lending positions."""
