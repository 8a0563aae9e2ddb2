"""
Call-site patterns used to detect AWS API calls in controller sources.

Each pattern describes one structural shape of a call (a metrics recording
call, a raw SDK client call, a generic client call). Patterns only match the
operation name as a complete call-site token, so "UpdateTable" does not match
a line calling "BatchUpdateTable".

New conventions are added by subclassing ``CallPattern`` and passing the
pattern list to the scanner; the traversal logic does not change.
"""

import re
from abc import ABC, abstractmethod


class CallPattern(ABC):
    """
    Abstract base class for call-site patterns.

    Example:
        >>> class PaginatorPattern(CallPattern):
        ...     @property
        ...     def name(self) -> str:
        ...         return "paginator"
        ...
        ...     def compile(self, operation: str) -> re.Pattern:
        ...         return re.compile(rf"\\bNew{re.escape(operation)}Paginator\\(")
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the pattern name (used in logs)."""
        pass

    @abstractmethod
    def compile(self, operation: str) -> re.Pattern:
        """
        Build the regular expression that finds calls to ``operation``.

        Args:
            operation: API operation name, e.g. "CreateTable"

        Returns:
            Compiled pattern matched against single source lines
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name='{self.name}')>"


class RecordAPICallPattern(CallPattern):
    """``rm.metrics.RecordAPICall("CREATE", "CreateTable", err)``"""

    @property
    def name(self) -> str:
        return "record_api_call"

    def compile(self, operation: str) -> re.Pattern:
        return re.compile(rf'\bRecordAPICall\(\s*[^,()]+,\s*"{re.escape(operation)}"')


class ReceiverCallPattern(CallPattern):
    """``<receiver>.<Operation>(...)`` or ``<receiver>.<Operation>WithContext(...)``"""

    def __init__(self, receiver: str, pattern_name: str):
        self.receiver = receiver
        self._name = pattern_name

    @property
    def name(self) -> str:
        return self._name

    def compile(self, operation: str) -> re.Pattern:
        return re.compile(
            rf"\b{re.escape(self.receiver)}\.{re.escape(operation)}(?:WithContext)?\("
        )


class RawClientPattern(ReceiverCallPattern):
    """``rm.sdkapi.CreateTable(ctx, input)``"""

    def __init__(self):
        super().__init__("sdkapi", "raw_api_client")


class GenericClientPattern(ReceiverCallPattern):
    """``rm.client.CreateTable(ctx, input)``"""

    def __init__(self):
        super().__init__("client", "generic_client")


DEFAULT_PATTERNS: tuple[CallPattern, ...] = (
    RecordAPICallPattern(),
    RawClientPattern(),
    GenericClientPattern(),
)
