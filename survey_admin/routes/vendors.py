"""Vendor endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from survey_admin.http.problem import missing_field, not_found
from survey_admin.logic import repository_vendors as repo
from survey_admin.models.tenants import VendorBody

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/vendors", summary="List vendors", operation_id="listVendors", tags=["Tenants"])
def list_vendors():
    return {"success": True, "vendors": repo.list_vendors()}


@router.post("/vendors", status_code=201, summary="Create a vendor", operation_id="createVendor", tags=["Tenants"])
def create_vendor(body: VendorBody):
    if not (body.name or "").strip():
        return missing_field("name")
    new_id = repo.create_vendor(body.model_dump())
    logger.info("vendors.created id=%s", new_id)
    return {"success": True, "id": new_id, "message": "Vendor created successfully"}


@router.put("/vendors/{vendor_id}", summary="Update a vendor", operation_id="updateVendor", tags=["Tenants"])
def update_vendor(vendor_id: int, body: VendorBody):
    if not (body.name or "").strip():
        return missing_field("name")
    if not repo.update_vendor(vendor_id, body.model_dump()):
        return not_found("Vendor not found")
    return {"success": True, "message": "Vendor updated successfully"}


@router.delete("/vendors/{vendor_id}", summary="Delete a vendor", operation_id="deleteVendor", tags=["Tenants"])
def delete_vendor(vendor_id: int):
    if not repo.delete_vendor(vendor_id):
        return not_found("Vendor not found")
    logger.info("vendors.deleted id=%s", vendor_id)
    return {"success": True, "message": "Vendor deleted successfully"}
