from pydantic import BaseModel


class UserSummary(BaseModel):
    id: int
    first_name: str | None = None
    last_name: str | None = None
    email: str

    class Config:
        from_attributes = True


class UserDetail(UserSummary):
    phone: str | None = None
