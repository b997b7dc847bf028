from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict

# "2021-07-27T21:10:10.000+0000" -> "2021-07-27T21:10:10.000+00:00"
_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")


def _iso_offset(value: Any) -> Any:
    if isinstance(value, str):
        return _COMPACT_OFFSET.sub(r"\1:\2", value.strip())
    return value


class AccountCreditBalance(BaseModel):
    """Current credit balance of the authenticated account."""

    model_config = ConfigDict(frozen=True)

    credits: int
    credits_in_reserve: int
    recorded_on: Annotated[datetime, BeforeValidator(_iso_offset)]
