"""Callbacks around each value bag in batch validation."""

import logging
import typing

from . import result as _result

logger = logging.getLogger(__name__)

ResultCallback = typing.Callable[[_result.RecordValidationResult], None]


class ValidationHooks:
    """Optional callbacks for batch validation events.

    A hook that raises is logged and ignored so that one faulty callback
    cannot stop a batch.

    Attributes:
        before_validate: Called with the raw value bag before validation
        after_validate: Called with every result
        on_success: Called with results whose ``error`` is None
        on_error: Called with results that carry a ValidationError
        should_continue: Returns False to stop the batch after a result
    """

    def __init__(
        self,
        *,
        before_validate: typing.Callable[[typing.Any], None] | None = None,
        after_validate: ResultCallback | None = None,
        on_success: ResultCallback | None = None,
        on_error: ResultCallback | None = None,
        should_continue: typing.Callable[[_result.RecordValidationResult], bool] | None = None,
    ) -> None:
        self.before_validate = before_validate
        self.after_validate = after_validate
        self.on_success = on_success
        self.on_error = on_error
        self.should_continue = should_continue

    def _call(self, name: str, callback: typing.Callable[[typing.Any], typing.Any], arg: typing.Any) -> None:
        try:
            callback(arg)
        except Exception:
            logger.warning("Validation hook %s raised; ignoring", name, exc_info=True)

    def call_before_validate(self, record: typing.Any) -> None:
        if self.before_validate is not None:
            self._call("before_validate", self.before_validate, record)

    def call_after_validate(self, result: _result.RecordValidationResult) -> None:
        if self.after_validate is not None:
            self._call("after_validate", self.after_validate, result)

    def call_on_success(self, result: _result.RecordValidationResult) -> None:
        if self.on_success is not None and result.error is None:
            self._call("on_success", self.on_success, result)

    def call_on_error(self, result: _result.RecordValidationResult) -> None:
        if self.on_error is not None and result.error is not None:
            self._call("on_error", self.on_error, result)

    def dispatch(self, result: _result.RecordValidationResult) -> bool:
        """Run the result hooks and report whether the batch should go on."""
        self.call_after_validate(result)
        self.call_on_success(result)
        self.call_on_error(result)
        return self.check_should_continue(result)

    def check_should_continue(self, result: _result.RecordValidationResult) -> bool:
        """Ask ``should_continue``; a raising callback means continue.

        Returns:
            True to keep validating, False to stop
        """
        if self.should_continue is None:
            return True
        try:
            return bool(self.should_continue(result))
        except Exception:
            logger.warning("Validation hook should_continue raised; continuing", exc_info=True)
            return True
