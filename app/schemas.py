"""
REQUEST SCHEMAS
===============

Typed request bodies. Routes parse JSON through parse_body(), so every
route sees a validated object and a bad body becomes InvalidArgument (400)
before any service runs.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Literal, Optional

from flask import request
from pydantic import BaseModel, EmailStr, Field, StrictInt, ValidationError, field_validator, model_validator

from app.errors import InvalidArgument


def parse_body(schema, **overrides):
    """Validate the JSON body of the current request against schema."""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise InvalidArgument("Request body must be a JSON object")
    payload.update(overrides)

    try:
        return schema(**payload)
    except ValidationError as e:
        error = e.errors()[0]
        field = '.'.join(str(p) for p in error['loc'])
        message = error['msg'].removeprefix('Value error, ')
        raise InvalidArgument(f"{field}: {message}" if field else message)


# ============================================================
# AUTH
# ============================================================

class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    display_name: Optional[str] = Field(default=None, max_length=100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


# ============================================================
# GROUPS
# ============================================================

class CreateGroupRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    currency: str = Field(default='USD', min_length=3, max_length=3)
    approval_threshold: Optional[int] = Field(default=None, ge=1)

    @field_validator('name')
    @classmethod
    def strip_name(cls, name):
        name = name.strip()
        if not name:
            raise ValueError("name required")
        return name

    @field_validator('currency')
    @classmethod
    def upper_currency(cls, currency):
        return currency.upper()


class AddMemberRequest(BaseModel):
    email: EmailStr
    role: Literal['admin', 'member', 'viewer'] = 'member'


class GroupSettingsRequest(BaseModel):
    approval_threshold: int = Field(ge=1)


# ============================================================
# TRANSACTIONS
# ============================================================

class CreateTransactionRequest(BaseModel):
    """
    Body of POST /transactions.

    Amount can arrive as amount_cents (integer minor units) or as amount
    (major units, at most two decimals). amount_cents wins if both are sent.
    """
    group_id: int
    type: Literal['collect', 'spend', 'reimburse']
    amount_cents: Optional[StrictInt] = None
    amount: Optional[Decimal] = None
    description: Optional[str] = Field(default=None, max_length=500)
    due_date: Optional[datetime] = None
    account_id: Optional[int] = None

    @field_validator('due_date')
    @classmethod
    def naive_utc(cls, due_date):
        if due_date is not None and due_date.tzinfo is not None:
            due_date = due_date.astimezone(timezone.utc).replace(tzinfo=None)
        return due_date

    @model_validator(mode='after')
    def resolve_cents(self):
        if self.amount_cents is None:
            if self.amount is None:
                raise ValueError("amount or amount_cents required")
            self.amount_cents = to_cents(self.amount)

        if self.amount_cents <= 0:
            raise ValueError("Amount must be greater than 0")
        return self


def to_cents(amount):
    """Convert a major-unit amount to integer cents. Rejects sub-cent precision."""
    try:
        cents = Decimal(amount) * 100
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError("amount must be a number")

    if not cents.is_finite():
        raise ValueError("amount must be a number")
    if cents != cents.to_integral_value():
        raise ValueError("amount cannot have more than two decimal places")
    return int(cents)


class DecisionRequest(BaseModel):
    decision: str

    @field_validator('decision')
    @classmethod
    def known_decision(cls, decision):
        if decision not in ('approve', 'reject'):
            raise ValueError("decision must be approve|reject")
        return decision


class CommentRequest(BaseModel):
    body: str = Field(min_length=1, max_length=1000)

    @field_validator('body')
    @classmethod
    def not_blank(cls, body):
        if not body.strip():
            raise ValueError("body required")
        return body


# ============================================================
# PERSONAL DATA
# ============================================================

class AccountRequest(BaseModel):
    bank_name: str = Field(min_length=1, max_length=100)
    account_number: str = Field(min_length=1, max_length=50)
    balance_cents: int = Field(default=0, ge=0)


class ContactRequest(BaseModel):
    contact_name: str = Field(min_length=1, max_length=100)
    contact_email: Optional[EmailStr] = None


class SettingsRequest(BaseModel):
    language: str = Field(default='en', min_length=2, max_length=10)
    theme: Literal['light', 'dark'] = 'light'
    audio_assist: bool = False
