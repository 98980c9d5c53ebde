"""Missing-header handling.

For every header the resolver could not satisfy, look up a package hint for
the host's platform family, report it, and, when pkg-config knows the
package, merge its compile and link flags into the run's BuildConfigBuilder.

Failure policy:
    - Outside sloppy mode, any missing header is fatal: the full report is
      printed, then MissingHeadersError is raised before anything compiles.
    - In sloppy mode the build continues with whatever flags were gathered.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from rich.console import Console
from rich.table import Table

from ..build.build_context import BuildConfigBuilder
from ..output import log, log_warning
from .package_hints import PackageHint, resolve
from .pkg_config import PkgConfig
from .platform_detect import PlatformFamily

logger = logging.getLogger(__name__)


class MissingHeadersError(Exception):
    """Raised when headers remain unresolved outside sloppy mode."""

    def __init__(self, missing: List[str], hints: Dict[str, PackageHint]):
        self.missing = list(missing)
        self.hints = dict(hints)
        super().__init__(
            f"{len(self.missing)} missing header(s): {', '.join(self.missing)}. "
            "Install the packages above, or use sloppy mode to build anyway."
        )


@dataclass
class HintReport:
    """What was learned about the missing headers of one run."""

    missing: List[str] = field(default_factory=list)
    hints: Dict[str, PackageHint] = field(default_factory=dict)
    compile_flags: List[str] = field(default_factory=list)
    link_flags: List[str] = field(default_factory=list)

    @property
    def unhinted(self) -> List[str]:
        return [h for h in self.missing if h not in self.hints]


class PackageHintEngine:
    """Turns missing headers into package hints and extra build flags."""

    def __init__(
        self,
        family: PlatformFamily,
        pkg_config: Optional[PkgConfig] = None,
        console: Optional[Console] = None,
    ):
        """Initialize the engine.

        Args:
            family: Platform family the hints are for
            pkg_config: Package metadata query tool (defaults to PkgConfig())
            console: Rich console the missing-header table is printed on
        """
        self.family = family
        self.pkg_config = pkg_config if pkg_config is not None else PkgConfig()
        self.console = console if console is not None else Console()

    def process(self, missing: Iterable[str], builder: BuildConfigBuilder) -> HintReport:
        """Report missing headers and merge discovered flags into builder.

        Args:
            missing: Header names that resolved nowhere
            builder: Configuration builder of the current run (mutated)

        Returns:
            HintReport describing hints and merged flags

        Raises:
            MissingHeadersError: If headers are missing and builder is not sloppy
        """
        report = HintReport(missing=list(missing))
        if not report.missing:
            return report

        for header in report.missing:
            hint = resolve(header, self.family)
            if hint is None:
                logger.debug(f"No package hint for <{header}>")
                continue
            report.hints[header] = hint

            flags = self.pkg_config.flags_for(hint.packages)
            if flags is None:
                continue
            builder.add_compile_flags(flags.compile_flags)
            builder.add_link_flags(flags.link_flags)
            report.compile_flags.extend(flags.compile_flags)
            report.link_flags.extend(flags.link_flags)
            logger.debug(
                f"Merged {len(flags.compile_flags)} compile and {len(flags.link_flags)} "
                f"link flags for {hint.package}"
            )

        self._print_report(report)

        if not builder.sloppy:
            raise MissingHeadersError(report.missing, report.hints)

        log_warning("Continuing in sloppy mode, ignoring missing headers.")
        return report

    def _print_report(self, report: HintReport) -> None:
        log("Missing headers:")
        table = Table(show_header=True, header_style="bold")
        table.add_column("Header")
        table.add_column("Package")
        table.add_column("Possibly install with")
        for header in report.missing:
            hint = report.hints.get(header)
            if hint is None:
                table.add_row(header, "-", "-")
            else:
                table.add_row(header, hint.package, hint.install_command)
        self.console.print(table)
