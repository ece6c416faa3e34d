"""String rules: lengths, formats and membership."""

import re

from .. import predicates as _predicates
from .base import BaseRule, RuleFunction, pattern, step

EMAIL = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
MOBILE = r"^[6-9]{1}[0-9]{9}$"
PINCODE = r"^[1-9]{1}[0-9]{2}\s{0,1}[0-9]{3}$"
PAN = r"^[A-Z]{5}[0-9]{4}[A-Z]{1}$"
IFSC = r"^[A-Z]{4}0[A-Z0-9]{6}$"
SLUG = r"^[0-9a-zA-Z-]+$"
URL = r"\b(?:(?:https?|ftp)://|www\.)[-a-z0-9+&@#/%?=~_|!:,.;]*[-a-z0-9+&@#/%=~_|]"
UUID = r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$"


class StringRule(BaseRule):
    """``string`` family."""

    def __init__(self) -> None:
        super().__init__(
            "string",
            RuleFunction(
                "valid",
                aliases=["string", "str"],
                steps=[step("@{field} must be a string", lambda value, *_: _predicates.is_string(value))],
            ),
        )

        self.define(
            "minLength",
            step(
                "@{field} must be at least @{param} characters long",
                lambda value, limit, _: len(value) >= limit,
            ),
            param_type="single",
            argument_type="integer",
            aliases=["minLength"],
        )
        self.define(
            "maxLength",
            step(
                "@{field} must be at most @{param} characters long",
                lambda value, limit, _: len(value) <= limit,
            ),
            param_type="single",
            argument_type="integer",
            aliases=["maxLength"],
        )
        self.define(
            "length",
            step(
                "@{field} must be exactly @{param} characters long",
                lambda value, limit, _: len(value) == limit,
            ),
            param_type="single",
            argument_type="integer",
            aliases=["length"],
        )
        self.define(
            "strongPassword",
            pattern("@{field} must contain at least one uppercase letter", r"[A-Z]"),
            pattern("@{field} must contain at least one lowercase letter", r"[a-z]"),
            pattern("@{field} must contain at least one digit", r"\d"),
            pattern("@{field} must contain at least one special character", r"[!@#$%^&*]"),
            step("@{field} must be at least 8 characters long", lambda value, *_: len(value) >= 8),
            aliases=["strongPassword"],
        )
        self.define("email", pattern("@{field} must be a valid email", EMAIL), aliases=["email"])
        self.define(
            "mobile",
            pattern("@{field} must be a valid mobile number", MOBILE),
            aliases=["mobile"],
        )
        self.define(
            "pincode",
            pattern("@{field} must be a valid PIN code", PINCODE),
            aliases=["pincode"],
        )
        self.define("pan", pattern("@{field} must be a valid PAN", PAN), aliases=["pan"])
        self.define("ifsc", pattern("@{field} must be a valid IFSC", IFSC), aliases=["ifsc"])
        self.define(
            "alpha",
            pattern("@{field} accepts alphabets only", r"^[a-zA-Z]+$"),
            aliases=["alpha"],
        )
        self.define(
            "alphaspace",
            pattern("@{field} accepts alphabets & spaces only", r"^[a-zA-Z\s]+$"),
            aliases=["alphaspace"],
        )
        self.define(
            "alphanum",
            pattern("@{field} accepts alphabets & numbers only", r"^[0-9a-zA-Z]+$"),
            aliases=["alphanum"],
        )
        self.define(
            "alphanumspace",
            pattern("@{field} accepts alphabets, numbers & spaces only", r"^[0-9a-zA-Z\s]+$"),
            aliases=["alphanumspace"],
        )
        self.define("slug", pattern("@{field} must be a valid slug", SLUG), aliases=["slug"])
        self.define(
            "url",
            pattern("@{field} must be a valid url", URL, re.IGNORECASE),
            aliases=["url"],
        )
        self.define(
            "uuid",
            pattern("@{field} must be a valid UUID", UUID, re.IGNORECASE),
            aliases=["uuid"],
        )
        self.define(
            "in",
            step(
                "@{field} must be one of (@{param})",
                lambda value, items, _: value in items,
            ),
            param_type="list",
            argument_type="string",
            aliases=["inList"],
        )
        self.define(
            "notIn",
            step(
                "@{field} must not be one of (@{param})",
                lambda value, items, _: value not in items,
            ),
            param_type="list",
            argument_type="string",
            aliases=["notInList"],
        )
        self.define(
            "equals",
            step("@{field} must be exactly @{param}", lambda value, other, _: value == other),
            param_type="single",
            argument_type="string",
            aliases=["strEquals"],
        )
        self.define(
            "notEquals",
            step("@{field} must not be @{param}", lambda value, other, _: value != other),
            param_type="single",
            argument_type="string",
            aliases=["strNotEquals"],
        )
        self.define(
            "contains",
            step("@{field} must contain @{param}", lambda value, part, _: part in value),
            param_type="single",
            argument_type="string",
            aliases=["strContains"],
        )
        self.define(
            "notContains",
            step("@{field} must not contain @{param}", lambda value, part, _: part not in value),
            param_type="single",
            argument_type="string",
            aliases=["strNotContains"],
        )
        self.define(
            "startsWith",
            step(
                "@{field} must start with @{param}",
                lambda value, prefix, _: value.startswith(prefix),
            ),
            param_type="single",
            argument_type="string",
            aliases=["startsWith"],
        )
        self.define(
            "notStartsWith",
            step(
                "@{field} must not start with @{param}",
                lambda value, prefix, _: not value.startswith(prefix),
            ),
            param_type="single",
            argument_type="string",
            aliases=["notStartsWith"],
        )
        self.define(
            "endsWith",
            step(
                "@{field} must end with @{param}",
                lambda value, suffix, _: value.endswith(suffix),
            ),
            param_type="single",
            argument_type="string",
            aliases=["endsWith"],
        )
        self.define(
            "notEndsWith",
            step(
                "@{field} must not end with @{param}",
                lambda value, suffix, _: not value.endswith(suffix),
            ),
            param_type="single",
            argument_type="string",
            aliases=["notEndsWith"],
        )
        self.define(
            "lowercase",
            step("@{field} must be lowercase", lambda value, *_: value == value.lower()),
            aliases=["lowercase"],
        )
        self.define(
            "uppercase",
            step("@{field} must be uppercase", lambda value, *_: value == value.upper()),
            aliases=["uppercase"],
        )
        self.define(
            "json",
            step("@{field} must be a valid JSON string", lambda value, *_: _predicates.is_json(value)),
            aliases=["json"],
        )
