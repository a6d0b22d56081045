"""Shared schema field types."""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator

from disrespect_tracker.utils.weeks import ensure_utc

# SQLite returns naive datetimes; responses always carry an explicit UTC offset
UTCDateTime = Annotated[datetime, AfterValidator(ensure_utc)]
