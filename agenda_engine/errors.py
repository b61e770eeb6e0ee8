"""Error taxonomy for the agenda engine."""


class AgendaError(Exception):
    """Base class for agenda engine errors."""


class ParseError(AgendaError, ValueError):
    """Unparseable date/time input."""


class RangeError(AgendaError, ValueError):
    """Range with its end before its start."""


class NotFound(AgendaError, LookupError):
    """An edit references an event or task that no longer exists."""
