"""Errors reported while compiling to Kindelia."""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from kindlang.diagnostics import Color, Diagnostic, DiagnosticFrame, Marker, Severity
from kindlang.render_config import RenderConfig
from kindlang.span import Range, SyntaxCtxIndex


class KdlCompilationError(Exception):
    """Raised when compilation to Kindelia reported errors."""

    def __init__(self, message: str = "generic compilation to hvm error") -> None:
        super().__init__(message)


class KdlDiagnostic(Diagnostic):
    """A diagnostic of the Kindelia back end; every one is an error."""

    code: ClassVar[int]
    range: Range

    @abstractmethod
    def title(self) -> str:
        """The headline of the diagnostic."""

    def get_syntax_ctx(self) -> SyntaxCtxIndex:
        return self.range.ctx

    def get_severity(self) -> Severity:
        return Severity.ERROR

    def to_diagnostic_frame(self, config: RenderConfig) -> DiagnosticFrame:
        marker = Marker(self.range, Color.FST, "Here!", no_code=False, main=True)
        return DiagnosticFrame(
            code=self.code,
            severity=Severity.ERROR,
            title=self.title(),
            positions=[marker],
        )


@dataclass
class InvalidVarName(KdlDiagnostic):
    code: ClassVar[int] = 600
    name: str
    range: Range

    def title(self) -> str:
        return f"Invalid variable name '{self.name}' for Kindelia."


@dataclass
class ShouldNotHaveArguments(KdlDiagnostic):
    code: ClassVar[int] = 601
    range: Range

    def title(self) -> str:
        return "This type of entry should not have arguments"


@dataclass
class ShouldHaveOnlyOneRule(KdlDiagnostic):
    code: ClassVar[int] = 603
    range: Range

    def title(self) -> str:
        return "This entry should only have one rule."


@dataclass
class NoInitEntry(KdlDiagnostic):
    code: ClassVar[int] = 604
    range: Range

    def title(self) -> str:
        return "This entry must have a init entry"


@dataclass
class FloatUsed(KdlDiagnostic):
    code: ClassVar[int] = 605
    range: Range

    def title(self) -> str:
        return "Found F60 in kindelia program"