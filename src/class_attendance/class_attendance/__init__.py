"""Class schedule & attendance package.

This package is organized by feature modules (academics, timetable, attendance,
reports, ...) with a thin Flask controller layer and service/repository layers.
"""
