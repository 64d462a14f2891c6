"""Hostel Management System package.

Organized by feature modules (users, complaints, leaves, attendance, ...)
with a thin Flask controller layer over service/repository layers. All state
is held in memory and seeded with mock data on start-up.
"""
