"""Contact list and phonebook XML exports."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import FileResponse

from ...config import Settings, get_settings
from ...errors import NotFoundError
from ...persistence.contacts import ContactStore, get_contact_store
from ...services.phonebook import render_address_book

logger = logging.getLogger(__name__)

router = APIRouter(tags=["phonebook"])

XML_MEDIA_TYPE = "application/xml"


@router.get("/contacts.xml", response_class=Response, status_code=status.HTTP_200_OK)
def export_contacts_xml(store: ContactStore = Depends(get_contact_store)) -> Response:
    contacts = store.list_contacts()
    logger.info(f"Exporting {len(contacts)} contacts as XML")
    return Response(
        content=render_address_book(contacts),
        media_type=XML_MEDIA_TYPE,
        headers={"Cache-Control": "s-maxage=60, stale-while-revalidate=300"},
    )


@router.get("/phonebook.xml", response_class=FileResponse, status_code=status.HTTP_200_OK)
def export_phonebook_xml(config: Settings = Depends(get_settings)) -> FileResponse:
    file_path = config.phonebook_file
    if not file_path.is_file():
        logger.error(f"Phonebook file not found: {file_path}")
        raise NotFoundError("Phonebook file not found.")
    return FileResponse(
        path=file_path,
        filename=file_path.name,
        media_type=XML_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{file_path.name}"'},
    )
