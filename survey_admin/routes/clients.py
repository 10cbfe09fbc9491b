"""Client endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter

from survey_admin.http.problem import missing_field, not_found
from survey_admin.logic import repository_clients as repo
from survey_admin.logic.repository_partners import partner_exists
from survey_admin.models.tenants import ClientBody

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/clients", summary="List clients", operation_id="listClients", tags=["Tenants"])
def list_clients(partner_id: Optional[int] = None):
    return {"success": True, "clients": repo.list_clients(partner_id)}


@router.post("/clients", status_code=201, summary="Create a client", operation_id="createClient", tags=["Tenants"])
def create_client(body: ClientBody):
    if body.client_partner_id is None:
        return missing_field("client_partner_id")
    if not (body.name or "").strip():
        return missing_field("name")
    if not partner_exists(body.client_partner_id):
        return not_found("Client partner not found")
    new_id = repo.create_client(body.model_dump())
    logger.info("clients.created id=%s partner=%s", new_id, body.client_partner_id)
    return {"success": True, "id": new_id, "message": "Client created successfully"}


@router.put("/clients/{client_id}", summary="Update a client", operation_id="updateClient", tags=["Tenants"])
def update_client(client_id: int, body: ClientBody):
    if not (body.name or "").strip():
        return missing_field("name")
    if not repo.update_client(client_id, body.model_dump()):
        return not_found("Client not found")
    return {"success": True, "message": "Client updated successfully"}


@router.delete("/clients/{client_id}", summary="Delete a client", operation_id="deleteClient", tags=["Tenants"])
def delete_client(client_id: int):
    if not repo.delete_client(client_id):
        return not_found("Client not found")
    logger.info("clients.deleted id=%s", client_id)
    return {"success": True, "message": "Client deleted successfully"}
