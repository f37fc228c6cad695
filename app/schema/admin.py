"""
Operator schemas (schema bootstrap and connectivity).
"""
from datetime import datetime
from typing import Dict, List
from pydantic import BaseModel, Field


class SchemaSetupResponse(BaseModel):
    message: str
    tables: Dict[str, List[str]] = Field(..., description="Verified table -> column names.")
    timestamp: datetime


class ConnectivityResponse(BaseModel):
    success: bool
    message: str
    timestamp: datetime
