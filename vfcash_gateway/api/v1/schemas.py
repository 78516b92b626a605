"""Pydantic schemas for API request/response bodies (camelCase on the wire)"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TransactionSchema(CamelModel):
    """Stored transaction as returned to clients"""

    id: str
    type: str
    amount: Union[int, float]
    phone_number: str
    date: Union[str, int, float]
    balance_before: Union[int, float]
    balance_after: Union[int, float]
    sender_name: Optional[str] = None
    transaction_number: Optional[str] = None
    service_fees: Optional[Union[int, float]] = None


class LimitsSchema(CamelModel):
    daily_transfer_limit: float
    monthly_transfer_limit: float
    daily_receive_limit: float
    monthly_receive_limit: float


class ErrorDetail(BaseModel):
    """Validation failure of one record in a batch"""

    index: int
    error: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[List[ErrorDetail]] = None


class TransactionListResponse(BaseModel):
    """Response for GET /transactions"""

    success: bool = True
    transactions: List[TransactionSchema]
    count: int


class IngestResponse(CamelModel):
    """Response for POST /transactions"""

    success: bool = True
    message: str
    transaction_count: int


class BulkSummary(CamelModel):
    total_processed: int
    added: int
    updated: int
    total_transactions: int


class BulkIngestResponse(BaseModel):
    """Response for POST /transactions/bulk"""

    success: bool = True
    message: str
    summary: BulkSummary


class ClearResponse(BaseModel):
    """Response for DELETE /transactions"""

    success: bool = True
    message: str


class SmsRequest(BaseModel):
    """Request body for POST /transactions/sms"""

    message: str = Field(..., min_length=1, description="Raw SMS text")
    id: Optional[str] = Field(None, min_length=1, description="Transaction id, defaults to receipt time in ms")


class SmsIngestResponse(CamelModel):
    """Response for POST /transactions/sms"""

    success: bool = True
    message: str
    transaction: TransactionSchema
    transaction_count: int


class LimitsResponse(BaseModel):
    """Response for GET /limits"""

    success: bool = True
    limits: LimitsSchema


class LimitsUpdateResponse(BaseModel):
    """Response for POST/PUT /limits"""

    success: bool = True
    message: str
    limits: LimitsSchema


class LimitUsageSchema(BaseModel):
    used: float
    limit: float
    percentage: float
    remaining: float
    level: str


class UsageSchema(CamelModel):
    reference_time: datetime
    daily_transfer: LimitUsageSchema
    monthly_transfer: LimitUsageSchema
    daily_receive: LimitUsageSchema
    monthly_receive: LimitUsageSchema


class UsageResponse(BaseModel):
    """Response for GET /usage"""

    success: bool = True
    usage: UsageSchema
