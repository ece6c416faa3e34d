"""Turn validation results into error maps, response bodies and files."""

import csv
import datetime
import json
import typing
from pathlib import Path

from . import result as _result

ErrorDetail = dict[str, typing.Any]


def collect_errors(results: _result.Results, prefix: str = "") -> dict[str, ErrorDetail]:
    """Flatten a results map into dotted paths of failing fields.

    Nested ``schema``/``arrayOfSchema`` failures are reported at their
    deepest failing field (``users.0.name``).

    Args:
        results: Per-field results from ``validate``
        prefix: Path prefix for nested results

    Returns:
        Mapping of path to ``{"field", "rule", "error"}`` where ``rule`` is
        ``type::function``
    """
    errors: dict[str, ErrorDetail] = {}
    for field, response in results.items():
        path = f"{prefix}{field}"
        if response.valid:
            continue
        if response.children:
            nested = collect_errors(response.children, f"{path}.")
            if nested:
                errors.update(nested)
                continue
        rule = response.rule or ""
        if response.function:
            rule = f"{rule}::{response.function}"
        errors[path] = {"field": path, "rule": rule, "error": response.error}
    return errors


def first_errors(results: _result.Results) -> dict[str, str | None]:
    """Top-level field name to its error message, for failing fields only."""
    return {field: response.error for field, response in results.items() if not response.valid}


def processed_values(results: _result.Results) -> dict[str, typing.Any]:
    """Processed values of every field, as attached to a request on success."""
    return {field: response.processed_value for field, response in results.items()}


def is_valid(results: _result.Results) -> bool:
    return all(response.valid for response in results.values())


def error_response(
    results: _result.Results,
    *,
    status: str = "error",
    message: str = "Validation error",
    verbose: bool = False,
    wrap: str | None = None,
    emit: typing.Callable[[dict[str, typing.Any]], typing.Any] | None = None,
) -> dict[str, typing.Any] | None:
    """Build the JSON body an HTTP layer returns with a 400 status.

    Args:
        results: Per-field results from ``validate``
        status: Value of the ``status`` key
        message: Value of the ``message`` key
        verbose: Report flattened ``{field, rule, error}`` details instead of
                 one message per top-level field
        wrap: Nest the errors under this key inside ``errors``
        emit: Called with the body, e.g. to send it; its return value is
              ignored

    Returns:
        The response body, or None when every field is valid

    Example:
        >>> error_response(validate({"email": "require"}, {"email": ""}))
        {'status': 'error', 'message': 'Validation error', 'errors': {'email': 'Email is required'}}
    """
    if is_valid(results):
        return None
    errors: dict[str, typing.Any] = collect_errors(results) if verbose else first_errors(results)
    if wrap:
        errors = {wrap: errors}
    body = {"status": status, "message": message, "errors": errors}
    if emit is not None:
        emit(body)
    return body


def _serialize_value(value: typing.Any) -> typing.Any:
    """Make a value JSON-serializable."""
    if isinstance(value, (str, int, float, bool, type(None))):
        return value
    if isinstance(value, typing.Mapping):
        return {str(k): _serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize_value(v) for v in value]
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    if hasattr(value, "model_dump"):
        return _serialize_value(value.model_dump())
    return str(value)


def export_results(
    results: typing.Iterable[_result.RecordValidationResult],
    path: str | Path,
    *,
    format: typing.Literal["json", "csv"] = "json",
    errors_only: bool = False,
    include_original: bool = True,
) -> None:
    """Write batch validation results to a file.

    Args:
        results: Results from ``validate_records``
        path: Output file path
        format: ``json`` or ``csv``
        errors_only: Only write value bags that failed
        include_original: Include the original value bag

    Raises:
        ValueError: If the format is not supported
    """
    path = Path(path)
    selected = [r for r in results if not errors_only or r.error is not None]

    if format == "json":
        _export_json(selected, path, include_original)
    elif format == "csv":
        _export_csv(selected, path, include_original)
    else:
        raise ValueError(f"Unsupported format: {format}. Use 'json' or 'csv'")


def _export_json(
    results: list[_result.RecordValidationResult], path: Path, include_original: bool
) -> None:
    export_data = []
    for result in results:
        record_data: dict[str, typing.Any] = {"valid": result.error is None}
        if include_original:
            record_data["original"] = _serialize_value(result.value)
        if result.error is not None:
            record_data["errors"] = _serialize_value(result.error.errors)
        elif result.result is not None:
            record_data["processed"] = _serialize_value(result.result)
        export_data.append(record_data)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(export_data, f, indent=2, ensure_ascii=False)


def _export_csv(
    results: list[_result.RecordValidationResult], path: Path, include_original: bool
) -> None:
    rows = []
    for result in results:
        row: dict[str, typing.Any] = {"valid": "yes" if result.error is None else "no"}
        if result.error is not None:
            row["error_fields"] = "; ".join(result.error.errors)
            row["error_messages"] = "; ".join(
                str(detail.get("error")) for detail in result.error.errors.values()
            )
        else:
            row["error_fields"] = ""
            row["error_messages"] = ""

        if include_original:
            if isinstance(result.value, typing.Mapping):
                for key, value in result.value.items():
                    row[f"original_{key}"] = str(value)
            else:
                row["original_value"] = str(result.value)

        if result.result is not None:
            for key, value in result.result.items():
                row[f"processed_{key}"] = str(value)

        rows.append(row)

    if not rows:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=["valid"])
            writer.writeheader()
        return

    all_keys: set[str] = set()
    for row in rows:
        all_keys.update(row.keys())
    fieldnames = sorted(all_keys)

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)
