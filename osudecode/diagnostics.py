"""Sinks for non-fatal decoder diagnostics.

A sink is any callable which accepts a single message string. The decoder
reports conditions it tolerates, like records with more columns than it
reads, through the sink it was given. Sinks only observe; the decoded
beatmap is the same whichever sink is used.
"""
import logging

log = logging.getLogger(__name__)


def log_diagnostic(message):
    """Report a diagnostic through :mod:`logging` at the ``WARNING`` level.

    This is the default sink.
    """
    log.warning(message)


def ignore_diagnostic(message):
    """Drop a diagnostic.
    """


class DiagnosticCollector:
    """A sink which remembers every message it receives.

    Examples
    --------
    .. code-block:: python

       collector = DiagnosticCollector()
       Beatmap.parse(data, diagnostics=collector)
       for message in collector.messages:
           ...
    """
    def __init__(self):
        self.messages = []

    def __call__(self, message):
        self.messages.append(message)

    def __len__(self):
        return len(self.messages)

    def __iter__(self):
        return iter(self.messages)

    def __repr__(self):
        return f'<{type(self).__qualname__}: {len(self)} messages>'
