"""Pydantic bodies for client partners, clients and vendors."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel

ClientSize = Literal["Small", "Medium", "Large", "Enterprise"]


class PartnerBody(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None


class ClientBody(BaseModel):
    client_partner_id: Optional[int] = None
    name: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[ClientSize] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None


class VendorBody(BaseModel):
    name: Optional[str] = None
    industry: Optional[str] = None
    vendor_type: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None


__all__ = ["ClientSize", "PartnerBody", "ClientBody", "VendorBody"]
