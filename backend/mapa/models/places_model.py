from pydantic import BaseModel
from typing import List
from mapa.models.base_model import Marker

class PointsResponse(BaseModel):
    category: str
    zone: str
    markers: List[Marker]
