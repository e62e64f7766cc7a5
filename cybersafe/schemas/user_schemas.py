from pydantic import BaseModel, ConfigDict


class User(BaseModel):
    """Public view of a user. Never carries the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    fullname: str
    gender: str
    email: str
