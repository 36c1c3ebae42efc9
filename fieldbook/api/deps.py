from datetime import datetime
from typing import Annotated

from fastapi import Query

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from ..db import schemas
from ..db.models import BookingStatus


def booking_filters(
    page: Annotated[int, Query(ge=1)] = DEFAULT_PAGE,
    limit: Annotated[int, Query(ge=1)] = DEFAULT_PAGE_SIZE,
    sorted_by: schemas.BookingSortField = schemas.BookingSortField.created_at,
    sorted_direction: schemas.SortDirection = schemas.SortDirection.desc,
    user_id: Annotated[int | None, Query(ge=1)] = None,
    field_id: Annotated[int | None, Query(ge=1)] = None,
    status: BookingStatus | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> schemas.BookingFilters:
    return schemas.BookingFilters(
        page=page,
        limit=limit,
        sorted_by=sorted_by,
        sorted_direction=sorted_direction,
        user_id=user_id,
        field_id=field_id,
        status=status,
        start_date=start_date,
        end_date=end_date,
    )
