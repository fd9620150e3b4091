"""Exception types raised across the package."""


class CatalogError(Exception):
    """The color or icon table could not be read or parsed.

    Always fatal: nothing is scheduled without a valid catalog.
    """


class JobSpecError(ValueError):
    """A single-job spec string is malformed or references unknown indices."""


class EncodeError(OSError):
    """Writing one output image failed. Contained per job by the scheduler."""
