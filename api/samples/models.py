"""
Models for the Sample API
"""
from sqlmodel import SQLModel
from pydantic import ConfigDict

class Sample(SQLModel):
  id: int
  name: str | None = None

  model_config = ConfigDict(extra="ignore")
