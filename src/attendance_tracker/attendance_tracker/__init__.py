"""Attendance Tracker package.

Organized by feature modules (users, attendance, dashboard, reports) with a
thin Flask controller layer on top of service/repository layers.
"""
