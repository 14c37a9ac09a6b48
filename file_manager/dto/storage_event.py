from pydantic import BaseModel, ConfigDict, Field


class StorageObject(BaseModel):
    model_config = ConfigDict(extra="ignore")

    key: str
    size: int = Field(0, ge=0)


class StorageBucket(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""


class StorageEntity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    bucket: StorageBucket = Field(default_factory=StorageBucket)
    object: StorageObject


class StorageEventRecord(BaseModel):
    """One object-created notification, S3 event notification shaped."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    event_name: str = Field("ObjectCreated:Put", alias="eventName")
    s3: StorageEntity


class StorageEvent(BaseModel):
    """Payload for /api/events/object-created."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    records: list[StorageEventRecord] = Field(default_factory=list, alias="Records")
