from models.base import CamelModel


class Alias(CamelModel):
    id: str
    name: str
    command: str
    description: str = ""


class AliasCreate(CamelModel):
    name: str | None = None
    command: str | None = None
    description: str | None = None


class AliasUpdate(CamelModel):
    name: str | None = None
    command: str | None = None
    description: str | None = None
