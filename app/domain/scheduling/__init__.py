"""
Scheduling Domain

Availability of professionals and the interval math shared by blocks,
bookings and the reminder sweep.

- time_calculator.py       half-open overlap/containment, slot enumeration
- availability_service.py  offerable start times and per-date occupancy
- router.py                /availability endpoints
"""
