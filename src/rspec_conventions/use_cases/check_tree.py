"""Use Case: check a tree of spec files and merge the results into one Report."""

from concurrent.futures import ThreadPoolExecutor
from pathlib import PurePosixPath

from rspec_conventions.domain.config import ConfigurationLoader
from rspec_conventions.domain.constants import PARSE_WARNING
from rspec_conventions.domain.entities import FileReport, Report, Severity, SpecFile, Violation
from rspec_conventions.domain.exceptions import InvocationError
from rspec_conventions.domain.protocols import FileSystemProtocol, TelemetryPort
from rspec_conventions.domain.rules.registry import RuleSet
from rspec_conventions.use_cases.check_file import SpecFileChecker


class CheckTreeUseCase:
    """Orchestrate discovery, per-file checking and aggregation."""

    def __init__(
        self,
        filesystem: FileSystemProtocol,
        telemetry: TelemetryPort,
        config_loader: ConfigurationLoader,
        rule_set: RuleSet,
    ) -> None:
        self.filesystem = filesystem
        self.telemetry = telemetry
        self.config_loader = config_loader
        self.rule_set = rule_set

    def execute(self, specs_root: str, source_root: str | None = None, jobs: int = 1) -> Report:
        """
        Check every spec file under specs_root.

        Args:
            specs_root: Directory (or single file) holding spec files.
            source_root: Directory mirrored by the spec tree; None disables the
                mirroring rule.
            jobs: Worker threads for per-file checks. Results do not depend on it.

        Returns:
            Report with files in lexical path order.

        Raises:
            InvocationError: specs_root or source_root does not exist or cannot
                be read.
        """
        if not self.filesystem.exists(specs_root):
            raise InvocationError(f"specs root '{specs_root}' does not exist")
        if self.filesystem.is_directory(specs_root) and not self.filesystem.is_readable_directory(specs_root):
            raise InvocationError(f"specs root '{specs_root}' is not readable")
        if source_root is not None and not self.filesystem.is_directory(source_root):
            raise InvocationError(f"source root '{source_root}' is not a directory")
        if source_root is not None and not self.filesystem.is_readable_directory(source_root):
            raise InvocationError(f"source root '{source_root}' is not readable")

        self.telemetry.step(f"Scanning {specs_root} for spec files...")
        spec_paths = self._discover(specs_root)
        source_index = self._index_sources(source_root)
        checker = SpecFileChecker(
            config=self.config_loader,
            rule_set=self.rule_set,
            source_index=source_index,
            source_root=source_root,
        )
        self.telemetry.step(
            f"Checking {len(spec_paths)} file(s) with {len(self.rule_set.rules)} rule(s)..."
        )

        def check_one(path: str) -> FileReport:
            return self._check_path(checker, path, specs_root)

        if jobs > 1 and len(spec_paths) > 1:
            with ThreadPoolExecutor(max_workers=jobs) as pool:
                fragments = list(pool.map(check_one, spec_paths))
        else:
            fragments = [check_one(path) for path in spec_paths]

        report = Report.merge(fragments)
        self.telemetry.step(
            f"Aggregated {len(report.violations)} violation(s) across {report.files_checked} file(s)."
        )
        return report

    def _discover(self, specs_root: str) -> list[str]:
        config = self.config_loader
        if not self.filesystem.is_directory(specs_root):
            # An explicitly named file is checked even if its name breaks the convention.
            return [specs_root]
        return [
            path
            for path in self.filesystem.find_files(specs_root, config.extensions)
            if config.is_spec_file_name(PurePosixPath(path.replace("\\", "/")).name)
        ]

    def _index_sources(self, source_root: str | None) -> frozenset[str] | None:
        if source_root is None:
            return None
        files = self.filesystem.find_files(source_root, self.config_loader.extensions)
        return frozenset(self.filesystem.relative_posix(f, source_root) for f in files)

    def _check_path(self, checker: SpecFileChecker, path: str, specs_root: str) -> FileReport:
        relative = (
            self.filesystem.relative_posix(path, specs_root)
            if self.filesystem.is_directory(specs_root)
            else path.replace("\\", "/").rsplit("/", 1)[-1]
        )
        display = path.replace("\\", "/")
        try:
            text = self.filesystem.read_text(path)
        except OSError as exc:
            self.telemetry.warning(f"Could not read {display}: {exc}")
            return FileReport(
                path=display,
                violations=(
                    Violation(
                        rule=PARSE_WARNING,
                        path=display,
                        line=1,
                        message=f"could not read file: {exc.strerror or exc}",
                        severity=Severity.WARNING,
                    ),
                ),
            )
        return checker.check(SpecFile(path=display, text=text, relative_path=relative))
