from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON bodies use camelCase; snake_case is accepted on input too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserRef(CamelModel):
    user_id: int
    email: str

    @classmethod
    def from_model(cls, user) -> "UserRef | None":
        if user is None:
            return None
        return cls(user_id=user.id, email=user.email)


class Message(CamelModel):
    message: str
