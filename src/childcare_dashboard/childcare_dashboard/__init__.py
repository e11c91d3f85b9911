"""Childcare dashboard backend.

Flask JSON API for a childcare centre: children, contracts and their planning,
attendance, daily activity records and messages, stored in MySQL.
"""
