from typing import Literal

from pydantic import BaseModel


class FavoriteStatusOut(BaseModel):
    saved: bool


class FavoriteResultOut(BaseModel):
    status: Literal["saved", "unsaved"]
