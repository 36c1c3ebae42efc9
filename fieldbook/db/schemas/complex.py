from pydantic import BaseModel


class ComplexSummary(BaseModel):
    id: int
    name: str
    address: str | None = None

    class Config:
        from_attributes = True
