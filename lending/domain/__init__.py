"""Domain layer - Business entities and value objects.

This package contains the equipment lending model. It is pure: no I/O,
no clock reads and no logging. Every date-sensitive operation receives
"today" from its caller.
"""
