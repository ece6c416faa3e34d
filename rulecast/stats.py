"""Validation statistics and aggregation utilities."""

import json
import typing
from collections import Counter
from dataclasses import asdict, dataclass

from . import export as _export
from . import result as _result

ResultLike = _result.RecordValidationResult | _result.Results


def _field_results(item: ResultLike) -> _result.Results:
    if isinstance(item, _result.RecordValidationResult):
        return item.fields
    return item


@dataclass
class ValidationStats:
    """Statistics about a batch of validated value bags.

    Attributes:
        total: Number of value bags validated
        valid_count: Value bags where every field passed
        invalid_count: Value bags with at least one failing field
        valid_percentage: Percentage of valid value bags
        invalid_percentage: Percentage of invalid value bags
        error_counts: Failures per rule (``type::function``)
        field_error_counts: Failures per field path (``users.0.name``)
        total_errors: Number of failing fields across the batch
    """

    total: int
    valid_count: int
    invalid_count: int
    valid_percentage: float
    invalid_percentage: float
    error_counts: dict[str, int]
    field_error_counts: dict[str, int]
    total_errors: int

    @classmethod
    def from_results(cls, results: typing.Iterable[ResultLike]) -> "ValidationStats":
        """Create ValidationStats from batch results or plain result maps.

        Args:
            results: RecordValidationResults or per-field results maps

        Returns:
            ValidationStats instance with computed statistics
        """
        results_list = [_field_results(item) for item in results]
        total = len(results_list)

        rule_counter: Counter[str] = Counter()
        field_counter: Counter[str] = Counter()
        valid_count = 0

        for field_results in results_list:
            errors = _export.collect_errors(field_results)
            if not errors and _export.is_valid(field_results):
                valid_count += 1
            for path, detail in errors.items():
                rule_counter[detail["rule"]] += 1
                field_counter[path] += 1

        invalid_count = total - valid_count
        return cls(
            total=total,
            valid_count=valid_count,
            invalid_count=invalid_count,
            valid_percentage=(valid_count / total * 100) if total > 0 else 0.0,
            invalid_percentage=(invalid_count / total * 100) if total > 0 else 0.0,
            error_counts=dict(rule_counter),
            field_error_counts=dict(field_counter),
            total_errors=sum(field_counter.values()),
        )

    def top_errors(self, n: int = 10) -> list[tuple[str, int]]:
        """Get the N rules that failed most often.

        Returns:
            List of (rule, count) tuples, sorted by count descending
        """
        return sorted(self.error_counts.items(), key=lambda x: x[1], reverse=True)[:n]

    def top_field_errors(self, n: int = 10) -> list[tuple[str, int]]:
        """Get the N fields that failed most often."""
        return sorted(self.field_error_counts.items(), key=lambda x: x[1], reverse=True)[:n]

    def to_dict(self) -> dict[str, typing.Any]:
        return asdict(self)

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        return (
            f"ValidationStats(total={self.total}, "
            f"valid={self.valid_count} ({self.valid_percentage:.1f}%), "
            f"invalid={self.invalid_count} ({self.invalid_percentage:.1f}%))"
        )


def get_stats(results: typing.Iterable[ResultLike]) -> ValidationStats:
    """Convenience function to get validation statistics.

    Example:
        >>> results = list(validate_records(records, {"email": "require|email"}))
        >>> print(f"Valid: {get_stats(results).valid_percentage:.1f}%")
    """
    return ValidationStats.from_results(results)
