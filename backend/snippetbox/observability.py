"""
Snippetbox — Fault Reporting
==============================

What:  The observability collaborator recover_panic hands every intercepted
       fault to.
How:   FaultReporter is a protocol; LoggingFaultReporter writes the fault with
       its full traceback to the `snippetbox.faults` logger, which deployments
       can route to their error tracker.
"""

import logging
from typing import Protocol

from snippetbox.exceptions import ServerFault


class FaultReporter(Protocol):
    def report(self, fault: ServerFault) -> None:
        ...


class LoggingFaultReporter:
    """Reports faults to a standard logger at ERROR level."""

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger("snippetbox.faults")

    def report(self, fault: ServerFault) -> None:
        self._logger.error(
            "Unhandled %s on %s %s: %s",
            fault.context["error_type"],
            fault.method,
            fault.path,
            fault.cause,
            exc_info=(type(fault.cause), fault.cause, fault.cause.__traceback__),
            extra={"fault_context": fault.context},
        )
