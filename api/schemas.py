from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr

from gateway.config import ConnectionConfig


class ConnectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    host: str = Field(..., min_length=1, max_length=255)
    port: int = Field(..., ge=1, le=65535)
    username: str = Field(default="", max_length=255)
    password: SecretStr = Field(default=SecretStr(""))
    database: str = Field(..., min_length=1, max_length=255)
    engine_type: str = Field(
        ...,
        min_length=1,
        max_length=30,
        validation_alias=AliasChoices("engineType", "dbType", "engine_type"),
        description="mysql, postgres or mongodb",
    )

    def to_config(self) -> ConnectionConfig:
        return ConnectionConfig(
            host=self.host,
            port=self.port,
            username=self.username,
            password=self.password.get_secret_value(),
            database=self.database,
            engine_type=self.engine_type.strip().lower(),
        )


class StatusResponse(BaseModel):
    status: str
    message: str


class ConnectResponse(BaseModel):
    status: str
    tables: List[str]


class ColumnsResponse(BaseModel):
    columns: List[str]


class InsertResponse(BaseModel):
    success: bool
    insertedId: Any = None


class UpdateResponse(BaseModel):
    success: bool


class DeleteRequest(BaseModel):
    ids: Optional[List[Union[int, str]]] = None


class DeleteResponse(BaseModel):
    success: bool
    deletedCount: int


class TableDataResponse(BaseModel):
    data: List[Dict[str, Any]]
    total: int


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
