"""Ordered resolution of untagged wire unions.

The BriteVerify API never says which shape it is sending; the shape is implied
by which keys are present. A payload with ``email``, ``phone`` and ``address``
is also a structurally valid (partial) match for every leaner shape, so
candidates are always tried richest-first and the first one that validates
wins. Nothing here relies on pydantic's own union trial order.
"""

from __future__ import annotations

import json
from typing import Any, ClassVar, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from briteverify.errors import UnmatchedVariant

VariantT = TypeVar("VariantT", bound=BaseModel)


def load_payload(data: Any) -> Any:
    if isinstance(data, (bytes, bytearray)):
        data = data.decode("utf-8")
    if isinstance(data, str):
        return json.loads(data)
    return data


def resolve_variant(union: str, candidates: Sequence[type[VariantT]], data: Any) -> VariantT:
    """Validate ``data`` against each candidate in order; return the first fit."""
    if isinstance(data, tuple(candidates)):
        return data
    payload = load_payload(data)
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    for candidate in candidates:
        try:
            return candidate.model_validate(payload)
        except ValidationError:
            continue
    raise UnmatchedVariant(union, payload)


class Variant(BaseModel):
    """Base for one arm of an untagged union.

    Subclasses that represent a whole union (``VerificationRequest`` and
    friends) set ``variants`` to their arms, most complete first. ``parse``
    then resolves raw data to the right arm.
    """

    model_config = ConfigDict(frozen=True)

    variants: ClassVar[tuple[type[Variant], ...]] = ()

    @classmethod
    def parse(cls, data: Any) -> Variant:
        # arms inherit `variants` from their union root but parse as themselves
        variants = cls.__dict__.get("variants")
        if not variants:
            if isinstance(data, cls):
                return data
            return cls.model_validate(load_payload(data))
        return resolve_variant(cls.__name__, variants, data)

    def _project(self, target: type[VariantT]) -> VariantT:
        # lossy: keeps only the fields `target` declares
        return target(**{name: getattr(self, name) for name in target.model_fields})