"""Predicate composition for instance listings."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from ec2ctl.models import FilterSpec, ResourceRecord

logger = logging.getLogger(__name__)

Predicate = Callable[[ResourceRecord], bool]

OPTION_NAMES = {
    "instance_id": "--instance-id",
    "name": "--name",
    "state": "--state",
    "private_ip": "--private-ip",
    "public_ip": "--public-ip",
    "ssh_key": "--ssh-key",
    "tag_key": "--tag-key",
    "tag_value": "--tag-value",
}

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InvalidFilterError(ValueError):
    """Raised when a filter expression is not a valid regular expression.

    Parameters
    ----------
    field : str
        Filter field the expression was supplied for
    expression : str
        The offending expression
    reason : str
        Message from the regular expression compiler
    """

    def __init__(self, field: str, expression: str, reason: str) -> None:
        self.field = field
        self.expression = expression
        option = OPTION_NAMES.get(field, field)
        super().__init__(
            f"invalid filter expression for {option}: '{expression}' ({reason})"
        )


def compile_pattern(field: str, expression: str, case_sensitive: bool) -> re.Pattern:
    """Compile one filter expression, raising InvalidFilterError on bad syntax."""
    flags = 0 if case_sensitive else re.IGNORECASE

    try:
        return re.compile(expression, flags)
    except re.error as e:
        raise InvalidFilterError(field, expression, str(e)) from e


def field_predicate(field: str, pattern: re.Pattern) -> Predicate:
    """Build a predicate matching ``pattern`` against one scalar record field.

    Missing values never match.
    """

    def predicate(record: ResourceRecord) -> bool:
        value = getattr(record, field)
        return value is not None and pattern.search(value) is not None

    return predicate


def tag_predicate(index: int, pattern: re.Pattern) -> Predicate:
    """Build an existential predicate over tag keys (index 0) or values (index 1)."""

    def predicate(record: ResourceRecord) -> bool:
        return any(pattern.search(tag[index]) is not None for tag in record.tags)

    return predicate


def compile_filter(spec: FilterSpec) -> Predicate:
    """Build a single predicate from a FilterSpec.

    Only supplied criteria take part in the conjunction, so a spec with no
    criteria yields a predicate that accepts every record.

    Parameters
    ----------
    spec : FilterSpec
        Criteria to compile

    Returns
    -------
    Predicate
        Function returning True for records matching every criterion

    Raises
    ------
    InvalidFilterError
        If any criterion is not a valid regular expression
    """
    predicates: list[Predicate] = []

    for field, expression in spec.active_criteria().items():
        pattern = compile_pattern(field, expression, spec.case_sensitive)

        if field == "tag_key":
            predicates.append(tag_predicate(0, pattern))
        elif field == "tag_value":
            predicates.append(tag_predicate(1, pattern))
        elif field == "instance_id":
            predicates.append(field_predicate("id", pattern))
        else:
            predicates.append(field_predicate(field, pattern))

    logger.debug("Compiled filter with %d active criteria", len(predicates))

    if not predicates:
        return lambda record: True

    if len(predicates) == 1:
        return predicates[0]

    return lambda record: all(predicate(record) for predicate in predicates)


def launch_sort_key(record: ResourceRecord) -> datetime:
    """Sort key for launch time; records without one sort as oldest."""
    return record.launch_time or _EPOCH


def filter_records(
    records: Iterable[ResourceRecord],
    spec: FilterSpec,
    predicate: Predicate | None = None,
) -> list[ResourceRecord]:
    """Return matching records, newest launch first.

    Parameters
    ----------
    records : Iterable[ResourceRecord]
        Records to filter
    spec : FilterSpec
        Criteria to apply
    predicate : Predicate | None
        Already compiled predicate for ``spec``; compiled here when None

    Returns
    -------
    list[ResourceRecord]
        Matching records sorted by launch time (descending), then id ascending
    """
    if predicate is None:
        predicate = compile_filter(spec)

    matches = [record for record in records if predicate(record)]
    matches.sort(key=lambda record: record.id)
    matches.sort(key=launch_sort_key, reverse=True)
    return matches
