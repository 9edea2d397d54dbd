"""Per-run outcome records for copy, move and delete."""

from dataclasses import dataclass, field

from log_roller.retention.scanner import FileRecord

STATUS_DONE = "done"
STATUS_SKIPPED = "skipped"  # destination already exists
STATUS_FAILED = "failed"


@dataclass
class FileOutcome:
    """What happened to one eligible file."""
    record: FileRecord
    operation: str  # "copy", "move", "delete"
    status: str
    destination: str | None = None
    error: str | None = None


@dataclass
class ActionResult:
    """Everything a single action invocation touched."""
    action: str
    outcomes: list[FileOutcome] = field(default_factory=list)

    def add(self, record: FileRecord, status: str, destination: str | None = None,
            error: str | None = None) -> FileOutcome:
        outcome = FileOutcome(
            record=record,
            operation=self.action,
            status=status,
            destination=destination,
            error=error,
        )
        self.outcomes.append(outcome)
        return outcome

    @property
    def files(self) -> list[FileRecord]:
        return [o.record for o in self.outcomes]

    @property
    def done(self) -> list[FileOutcome]:
        return [o for o in self.outcomes if o.status == STATUS_DONE]

    @property
    def skipped(self) -> list[FileOutcome]:
        return [o for o in self.outcomes if o.status == STATUS_SKIPPED]

    @property
    def failed(self) -> list[FileOutcome]:
        return [o for o in self.outcomes if o.status == STATUS_FAILED]

    @property
    def ok(self) -> bool:
        return not self.failed

    def __len__(self) -> int:
        return len(self.outcomes)
