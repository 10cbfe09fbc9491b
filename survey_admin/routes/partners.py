"""Client partner endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from survey_admin.http.problem import missing_field, not_found
from survey_admin.logic import repository_partners as repo
from survey_admin.models.tenants import PartnerBody

router = APIRouter()
logger = logging.getLogger(__name__)


def _blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@router.get("/client-partners", summary="List client partners", operation_id="listClientPartners", tags=["Tenants"])
def list_partners():
    return {"success": True, "client_partners": repo.list_partners()}


@router.post(
    "/client-partners",
    status_code=201,
    summary="Create a client partner",
    operation_id="createClientPartner",
    tags=["Tenants"],
)
def create_partner(body: PartnerBody):
    if _blank(body.name):
        return missing_field("name")
    new_id = repo.create_partner(body.model_dump())
    logger.info("partners.created id=%s", new_id)
    return {"success": True, "id": new_id, "message": "Client partner created successfully"}


@router.put(
    "/client-partners/{partner_id}",
    summary="Update a client partner",
    operation_id="updateClientPartner",
    tags=["Tenants"],
)
def update_partner(partner_id: int, body: PartnerBody):
    if _blank(body.name):
        return missing_field("name")
    if not repo.update_partner(partner_id, body.model_dump()):
        return not_found("Client partner not found")
    return {"success": True, "message": "Client partner updated successfully"}


@router.delete(
    "/client-partners/{partner_id}",
    summary="Delete a client partner and its clients",
    operation_id="deleteClientPartner",
    tags=["Tenants"],
)
def delete_partner(partner_id: int):
    if not repo.delete_partner(partner_id):
        return not_found("Client partner not found")
    logger.info("partners.deleted id=%s", partner_id)
    return {"success": True, "message": "Client partner deleted successfully"}
