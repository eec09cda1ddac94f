from pydantic import BaseModel


class StatusResponse(BaseModel):
    status: str
    connected: bool
    pipeline: dict[str, str]


class ConfigurationResponse(BaseModel):
    status: str
    connected: bool


class IndexResponse(BaseModel):
    status: str
