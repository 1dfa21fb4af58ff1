"""Event attendance administration package.

Organized by feature modules (employees, events, logs, attendance) with a thin
Flask controller layer over service/repository layers.
"""
