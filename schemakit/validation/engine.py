"""Validation Engine

Drives a raw value through a schema tree:

1. nullable short-circuit
2. coercion (coercive nodes) or runtime type check
3. the node's own constraints, in declaration order
4. children: object fields, array/set elements, map entries
5. effects, only when steps 1-4 produced no issues

Set and map constraints run after step 4 instead, on the container built
from the parsed children, and only when every child parsed. Sizes therefore
count elements and keys after coercion and deduplication.

Children report issues relative to themselves; the parent prefixes the
path segment while merging. Both public entry points derive from
``parse_node`` and differ only in how a failure is delivered.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, NamedTuple

from schemakit.errors import Err, IssueCode, Ok, SchemaDepthError, SchemaError
from schemakit.logging import engine_logger
from .errors import ValidationError, ValidationIssue, ValidationIssueAccumulator, create_accumulator
from .kinds import SchemaKind, describe_type, matches_kind
from .options import UnknownKeys, ValidationConfig, ValidationMode
from .result import ParseFailure, ParseResult, ParseSuccess

if TYPE_CHECKING:
    from .schema import SchemaNode


class NodeOutcome(NamedTuple):
    """Output of one node: a value when ``issues`` is empty, else None."""
    value: Any
    issues: list[ValidationIssue]

    @property
    def ok(self) -> bool:
        return not self.issues


def _failed(issues: list[ValidationIssue]) -> NodeOutcome:
    return NodeOutcome(None, issues)


def _invalid_type(kind: SchemaKind, value: Any) -> ValidationIssue:
    received = describe_type(value)
    return ValidationIssue(path=(), code=IssueCode.INVALID_TYPE,
        message=f"Expected {kind.value}, received {received}",
        params={"expected": kind.value, "received": received})


def _apply_constraints(node: SchemaNode, value: Any, acc: ValidationIssueAccumulator) -> bool:
    """Evaluate every constraint; returns False when the accumulator asks to stop."""
    for validator in node.constraints:
        result = validator.validate(value)
        if result.is_valid:
            continue
        issue = ValidationIssue(path=(), code=result.code or IssueCode.CUSTOM,
            message=result.message or "Invalid input",
            constraint=result.constraint or validator.constraint_name, params=result.params or {})
        if not acc.add(issue):
            return False
    return True


# ============================================================================
# Container parsers
# ============================================================================

def _parse_elements(node: SchemaNode, value: Any, config: ValidationConfig, depth: int,
                    acc: ValidationIssueAccumulator) -> list[Any]:
    items: list[Any] = []
    for index, item in enumerate(value):
        outcome = parse_node(node.element, item, config, depth)
        if outcome.ok:
            items.append(outcome.value)
        elif not acc.extend(outcome.issues, index):
            break
    return items


def _parse_array(node, value, config, depth, acc) -> list[Any]:
    return _parse_elements(node, value, config, depth, acc)


def _parse_set(node, value, config, depth, acc) -> set[Any] | frozenset[Any]:
    items = _parse_elements(node, value, config, depth, acc)
    return frozenset(items) if isinstance(value, frozenset) else set(items)


def _parse_map(node, value, config, depth, acc) -> dict[Any, Any]:
    output: dict[Any, Any] = {}
    for key, item in value.items():
        key_outcome = parse_node(node.key, key, config, depth)
        if not key_outcome.ok and not acc.extend(key_outcome.issues, key):
            break
        value_outcome = parse_node(node.value, item, config, depth)
        if not value_outcome.ok and not acc.extend(value_outcome.issues, key):
            break
        if not (key_outcome.ok and value_outcome.ok):
            continue
        if key_outcome.value in output:
            duplicate = ValidationIssue(path=(key,), code=IssueCode.DUPLICATE_KEY,
                message=f"Duplicate key after parsing: {key_outcome.value!r}",
                params={"key": key_outcome.value})
            if not acc.add(duplicate):
                break
            continue
        output[key_outcome.value] = value_outcome.value
    return output


def _parse_object(node, value, config, depth, acc) -> dict[str, Any]:
    output: dict[str, Any] = {}
    for name, child in node.fields:
        if name in value:
            raw = value[name]
        elif child.has_default:
            raw = child.default_fn()
        elif child.is_optional:
            continue
        else:
            required = ValidationIssue(path=(name,), code=IssueCode.REQUIRED, message="Required",
                params={"expected": child.kind.value, "received": "missing"})
            if not acc.add(required):
                return output
            continue

        outcome = parse_node(child, raw, config, depth)
        if outcome.ok:
            output[name] = outcome.value
        elif not acc.extend(outcome.issues, name):
            return output

    declared = set(node.keys)
    if unknown := [key for key in value if key not in declared]:
        policy = node.unknown_keys or config.unknown_keys
        if policy is UnknownKeys.STRICT:
            listed = ", ".join(f"'{key}'" for key in unknown)
            acc.add(ValidationIssue(path=(), code=IssueCode.UNRECOGNIZED_KEYS,
                message=f"Unrecognized key(s) in object: {listed}", params={"keys": unknown}))
        elif policy is UnknownKeys.PASSTHROUGH:
            output.update((key, value[key]) for key in unknown)
    return output


_CHILD_PARSERS: dict[SchemaKind, Callable[..., Any]] = {
    SchemaKind.ARRAY: _parse_array,
    SchemaKind.SET: _parse_set,
    SchemaKind.MAP: _parse_map,
    SchemaKind.OBJECT: _parse_object,
}

# constraints on these kinds see the container built from parsed children
_CHECKED_AFTER_CHILDREN = frozenset({SchemaKind.SET, SchemaKind.MAP})


# ============================================================================
# Core
# ============================================================================

def parse_node(node: SchemaNode, value: Any, config: ValidationConfig, depth: int = 0) -> NodeOutcome:
    """Parse ``value`` against ``node``; issues are relative to ``node``."""
    if depth > config.max_depth:
        raise SchemaDepthError(depth, config.max_depth)

    if value is None and node.is_nullable:
        return NodeOutcome(None, [])

    if getattr(node, "coercive", False):
        coerced = config.coercer.coerce(value, node.kind)
        if coerced.is_err():
            return _failed([ValidationIssue.from_error_info(coerced.unwrap_err())])
        value = coerced.unwrap()
    elif not matches_kind(node.kind, value):
        return _failed([_invalid_type(node.kind, value)])

    acc = create_accumulator(config.mode)
    after_children = node.kind in _CHECKED_AFTER_CHILDREN
    if not after_children and not _apply_constraints(node, value, acc):
        return _failed(acc.get_issues())

    if (child_parser := _CHILD_PARSERS.get(node.kind)) is not None:
        value = child_parser(node, value, config, depth + 1, acc)

    if after_children and not acc.has_issues():
        _apply_constraints(node, value, acc)

    if acc.has_issues():
        return _failed(acc.get_issues())

    for effect in node.effects:
        match effect.apply(value):
            case Ok(new_value):
                value = new_value
            case Err(issues):
                acc.extend(issues)
                return _failed(acc.get_issues())

    return NodeOutcome(value, [])


def _resolve_config(config: ValidationConfig | None, mode: ValidationMode | str | None) -> ValidationConfig:
    return (config or ValidationConfig.from_settings()).with_mode(mode)


def safe_parse(node: SchemaNode, value: Any, *, mode: ValidationMode | str | None = None,
               config: ValidationConfig | None = None) -> ParseResult:
    """Non-throwing entry point: always returns ParseSuccess or ParseFailure.

    Raises only for programmer errors (SchemaError) and for exceptions
    raised by user transforms or predicates.
    """
    if not isinstance(getattr(node, "kind", None), SchemaKind):
        raise SchemaError(f"Expected a schema node, got {type(node).__name__}")

    config = _resolve_config(config, mode)
    outcome = parse_node(node, value, config)
    if outcome.ok:
        return ParseSuccess(outcome.value)

    engine_logger().debug(
        "parse_failed",
        schema=node.kind.value,
        mode=config.mode.value,
        issue_count=len(outcome.issues),
    )
    return ParseFailure(ValidationError(issues=list(outcome.issues), mode=config.mode))


def parse(node: SchemaNode, value: Any, *, mode: ValidationMode | str | None = None,
          config: ValidationConfig | None = None) -> Any:
    """Throwing entry point: returns the parsed value or raises ValidationError."""
    match safe_parse(node, value, mode=mode, config=config):
        case ParseSuccess(data):
            return data
        case ParseFailure(error):
            raise error
