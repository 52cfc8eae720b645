# shapeguard public exports
import logging as _stdlib_logging

from shapeguard.config import Settings, get_settings
from shapeguard.logging import configure_logging, get_logger
from shapeguard.errors import AppError, Err, ErrorCode, Ok, Result
from shapeguard.validation import (
    UNDEFINED,
    Rule,
    RuleFailure,
    Schema,
    SchemaDefinitionError,
    ValidationError,
    ValidationErrorDetail,
    ValidationMode,
    array,
    boolean,
    describe,
    fail_with,
    integer,
    is_array_distinct,
    is_not_empty,
    is_safe_integer,
    is_string_record,
    is_valid_timestamp,
    literal,
    number,
    object,
    record,
    string,
    timestamp,
    try_parse_date,
    union,
)

__version__ = "0.1.0"

_stdlib_logging.getLogger("shapeguard").addHandler(_stdlib_logging.NullHandler())
