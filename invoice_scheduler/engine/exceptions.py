"""Scheduling engine exceptions"""


class SchedulingError(Exception):
    """Base exception for the scheduling engine"""

    pass


class InvalidInputError(SchedulingError):
    """The engine was called with arguments it cannot work with"""

    pass
