"""Dash front end for the Public Health Gateway (referral navigator and KPI dashboard)."""
