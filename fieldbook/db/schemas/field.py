from pydantic import BaseModel
from .complex import ComplexSummary


class FieldSummary(BaseModel):
    id: int
    name: str
    type: str | None = None
    price: float

    class Config:
        from_attributes = True


class FieldDetail(FieldSummary):
    complex: ComplexSummary | None = None
