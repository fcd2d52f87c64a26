"""Periodic quality scores for support-ticket ratings."""
