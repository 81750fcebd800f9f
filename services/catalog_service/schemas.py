from pydantic import BaseModel


class LookupCreate(BaseModel):
    name: str = ""


class LookupResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True
