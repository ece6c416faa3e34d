"""File upload rule family.

Uploads arrive in many shapes: mappings (``{"name", "size", "type"}``),
framework upload objects exposing ``filename``/``content_type``/``size``,
filesystem paths, or lists of any of these. Every rule first normalizes the
value into a list of ``FileDescriptor`` objects.
"""

import mimetypes
import os
import pathlib
import typing

import pydantic

from .. import predicates as _predicates
from .base import BaseRule, RuleFunction, step


class FileDescriptor(pydantic.BaseModel):
    """Normalized description of one uploaded file.

    Attributes:
        file: The original object the descriptor was built from
        name: File name
        size: Size in bytes
        type: MIME type (e.g. ``image/png``), empty when unknown
        extension: Lower-cased extension without the dot (e.g. ``png``)
    """

    model_config = pydantic.ConfigDict(frozen=True, arbitrary_types_allowed=True)

    file: typing.Any = None
    name: str = ""
    size: int = 0
    type: str = ""
    extension: str = ""

    @pydantic.model_validator(mode="before")
    @classmethod
    def _fill_derived(cls, data: typing.Any) -> typing.Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        name = str(data.get("name") or "")
        if not data.get("extension") and "." in name:
            data["extension"] = name.rsplit(".", 1)[1]
        if not data.get("type") and name:
            data["type"] = mimetypes.guess_type(name)[0] or ""
        data["extension"] = str(data.get("extension") or "").lower().lstrip(".")
        data["size"] = int(data.get("size") or 0)
        return data


def _first(source: typing.Any, *names: str) -> typing.Any:
    for name in names:
        if isinstance(source, typing.Mapping):
            found = source.get(name)
        else:
            found = getattr(source, name, None)
        if found:
            return found
    return None


def normalize_file(item: typing.Any) -> FileDescriptor:
    """Build a FileDescriptor from one upload-like object.

    Raises:
        TypeError: If the item does not look like a file
    """
    if isinstance(item, FileDescriptor):
        return item
    if isinstance(item, (str, os.PathLike)):
        path = pathlib.Path(item)
        size = path.stat().st_size if path.is_file() else 0
        return FileDescriptor(file=item, name=path.name, size=size)
    name = _first(item, "name", "filename")
    if name is None:
        raise TypeError(f"Cannot read a file name from {type(item).__name__}")
    return FileDescriptor(
        file=item,
        name=os.path.basename(str(name)),
        size=_first(item, "size", "content_length") or 0,
        type=_first(item, "type", "content_type", "mimetype") or "",
        extension=_first(item, "extension") or "",
    )


def normalize_files(value: typing.Any) -> list[FileDescriptor]:
    """Normalize a single upload or a list of uploads.

    Empty values normalize to an empty list.
    """
    if _predicates.is_empty(value):
        return []
    if isinstance(value, (list, tuple)):
        return [normalize_file(item) for item in value]
    return [normalize_file(value)]


def total_size(value: typing.Any) -> int:
    return sum(descriptor.size for descriptor in normalize_files(value))


def _is_file(value: typing.Any) -> bool:
    try:
        return bool(normalize_files(value))
    except (TypeError, ValueError, OSError):
        return False


def _all_match(value: typing.Any, allowed: typing.Callable[[FileDescriptor], bool]) -> bool:
    return all(allowed(descriptor) for descriptor in normalize_files(value))


def _accepted(descriptor: FileDescriptor, accepted: typing.Collection[str]) -> bool:
    accepted = {item.lower().lstrip(".") for item in accepted}
    return descriptor.extension in accepted or descriptor.type.lower() in accepted


def _is_media(kind: str) -> typing.Callable[[FileDescriptor], bool]:
    return lambda descriptor: descriptor.type.startswith(f"{kind}/")


class FileRule(BaseRule):
    """``file`` family."""

    def __init__(self) -> None:
        super().__init__(
            "file",
            RuleFunction(
                "valid",
                aliases=["file"],
                steps=[step("@{field} must be a file", lambda value, *_: _is_file(value))],
            ),
        )

        self.define(
            "minFiles",
            step(
                "At least @{param} files required for @{field}",
                lambda value, limit, _: len(normalize_files(value)) >= limit,
            ),
            param_type="single",
            argument_type="integer",
            aliases=["minFiles"],
        )
        self.define(
            "maxFiles",
            step(
                "Maximum @{param} files allowed for @{field}",
                lambda value, limit, _: len(normalize_files(value)) <= limit,
            ),
            param_type="single",
            argument_type="integer",
            aliases=["maxFiles"],
        )
        self.define(
            "minSize",
            step(
                "@{field} must be at least @{param.raw}",
                lambda value, limit, _: total_size(value) >= limit.bytes,
            ),
            param_type="fileSize",
            argument_type="string",
            aliases=["minFileSize"],
        )
        self.define(
            "maxSize",
            step(
                "@{field} exceeds maximum limit of @{param.raw}",
                lambda value, limit, _: total_size(value) <= limit.bytes,
            ),
            param_type="fileSize",
            argument_type="string",
            aliases=["maxFileSize"],
        )
        self.define(
            "accepts",
            step(
                "Invalid file. Only (@{param}) allowed",
                lambda value, accepted, _: _all_match(value, lambda d: _accepted(d, accepted)),
            ),
            param_type="list",
            argument_type="string",
            aliases=["fileAccepts"],
        )
        self.define(
            "noAccepts",
            step(
                "Invalid file. (@{param}) not allowed",
                lambda value, rejected, _: _all_match(value, lambda d: not _accepted(d, rejected)),
            ),
            param_type="list",
            argument_type="string",
            aliases=["fileNoAccepts"],
        )
        self.define(
            "imageOnly",
            step("@{field} accepts images only", lambda value, *_: _all_match(value, _is_media("image"))),
            aliases=["imageOnly"],
        )
        self.define(
            "videoOnly",
            step("@{field} accepts videos only", lambda value, *_: _all_match(value, _is_media("video"))),
            aliases=["videoOnly"],
        )
        self.define(
            "audioOnly",
            step("@{field} accepts audio files only", lambda value, *_: _all_match(value, _is_media("audio"))),
            aliases=["audioOnly"],
        )
