from pydantic import BaseModel


class BranchResponse(BaseModel):
    id: int
    name: str
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    operating_hours: str | None = None

    class Config:
        from_attributes = True
