import datetime
from typing import Optional

from pydantic import BaseModel


class LockDateRequest(BaseModel):
    date: datetime.date
    locked_by: Optional[int] = None
