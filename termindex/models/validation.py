"""
ValidationResult — outcome of an analysis consistency or payload check.
"""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ValidationResult:
    """Result of validating an analyzed document or an exported payload."""

    valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    data: Optional[dict] = None

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.valid = False

    def extend(self, other: "ValidationResult") -> None:
        for err in other.errors:
            self.add_error(err)
        self.warnings.extend(other.warnings)
