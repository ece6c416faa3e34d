"""Whitespace trimming processor."""

from .base import Processor, strings_only


class TrimProcessor(Processor):
    """``trim`` (post) / ``preTrim`` (pre): strip surrounding whitespace."""

    def __init__(self, is_preprocessor: bool = False) -> None:
        super().__init__("trim", is_preprocessor)
        self.define("default", strings_only(str.strip), desc="Strips surrounding whitespace")
