"""Validation of incoming order submissions.

Runs in two phases. The shape phase turns an arbitrary decoded JSON value into
an ``OrderSubmission`` or rejects it outright. The field-rule phase walks
``FIELD_RULES`` in order; every rule returns a human-readable reason when it
fails and ``None`` otherwise, and the first reason found is raised.
"""
import re
from typing import Any, Callable, Optional, Sequence

import pydantic

from shared.config.database import INTEGER_MAX
from shared.errors import ValidationError
from .schemas import LineItemRequest, OrderSubmission

Rule = Callable[[Any], Optional[str]]

SHAPE_ERROR = "Received not valid data"

PHONE_PATTERN = re.compile(r"\+?(?:\D*\d){7,15}\D*")
EMAIL_PATTERN = re.compile(
    r"(?!.*\.\.)[A-Z0-9._%+-]+@(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,}",
    re.IGNORECASE,
)
MAX_COMMENT_LENGTH = 150


def min_length(limit: int, reason: str) -> Rule:
    return lambda value: reason if len(value.strip()) < limit else None


def max_length(limit: int, reason: str) -> Rule:
    return lambda value: reason if len(value.strip()) > limit else None


def not_blank(reason: str) -> Rule:
    return lambda value: reason if not value.strip() else None


def matches(pattern: re.Pattern, reason: str) -> Rule:
    return lambda value: reason if not pattern.fullmatch(value) else None


def positive(reason: str) -> Rule:
    return lambda value: reason if value <= 0 else None


def at_most(limit: int, reason: str) -> Rule:
    return lambda value: reason if value > limit else None


def positive_whole_counts(reason: str) -> Rule:
    def rule(items: Sequence[LineItemRequest]) -> Optional[str]:
        for item in items:
            if item.count <= 0 or item.count != int(item.count):
                return reason
        return None
    return rule


def counts_at_most(limit: int, reason: str) -> Rule:
    def rule(items: Sequence[LineItemRequest]) -> Optional[str]:
        return reason if any(item.count > limit for item in items) else None
    return rule


FIELD_RULES: tuple[tuple[str, tuple[Rule, ...]], ...] = (
    ("name", (
        min_length(4, "The name must consist of at least 4 characters"),
    )),
    ("phone", (
        not_blank("You must provide a phone number"),
        matches(PHONE_PATTERN, "The phone is not valid"),
    )),
    ("email", (
        not_blank("You must provide an email address"),
        matches(EMAIL_PATTERN, "The email is not valid"),
    )),
    ("address", (
        min_length(6, "The address must consist of at least 6 characters"),
    )),
    ("comment", (
        max_length(MAX_COMMENT_LENGTH, "The value of the comment field is too long"),
    )),
    ("total_price", (
        positive("Not valid total price"),
        at_most(INTEGER_MAX, "Not valid total price"),
    )),
    ("products", (
        positive_whole_counts("Product count must be a positive whole number"),
        counts_at_most(INTEGER_MAX, "Product count is too large"),
    )),
)


def validate_shape(raw: Any) -> OrderSubmission:
    if not isinstance(raw, dict):
        raise ValidationError(SHAPE_ERROR)
    try:
        return OrderSubmission.model_validate(raw)
    except pydantic.ValidationError:
        raise ValidationError(SHAPE_ERROR)


def validate_fields(submission: OrderSubmission) -> OrderSubmission:
    for field, rules in FIELD_RULES:
        value = getattr(submission, field)
        # optional fields that were not provided are not checked
        if value is None:
            continue
        for rule in rules:
            reason = rule(value)
            if reason:
                raise ValidationError(reason)
    return submission


def validate(raw: Any) -> OrderSubmission:
    return validate_fields(validate_shape(raw))


def check_line_items(items: Sequence[LineItemRequest]) -> list[int]:
    """Cross-field checks on the product list; returns the product ids."""
    product_ids = [item.product_id for item in items]
    if not product_ids:
        raise ValidationError("Products are missing from the order")
    if len(set(product_ids)) != len(product_ids):
        raise ValidationError("There are duplicates in the list of products")
    return product_ids
