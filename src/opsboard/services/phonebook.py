"""Grandstream-style XML address book rendering."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Iterable

from ..models.domain import Contact

DEFAULT_GROUPS = ((0, "Default"), (100, "Blacklist"))


def _child(parent: ET.Element, tag: str, text: str | None = None, **attrib: str) -> ET.Element:
    element = ET.SubElement(parent, tag, attrib)
    if text is not None:
        element.text = text
    return element


def _group(book: ET.Element, group_id: int, name: str) -> None:
    group = _child(book, "pbgroup")
    _child(group, "id", str(group_id))
    _child(group, "name", name)
    _child(group, "photos")
    _child(group, "ringtones")
    _child(group, "RingtoneIndex", "0")


def _contact(book: ET.Element, contact: Contact) -> None:
    entry = _child(book, "Contact")
    _child(entry, "id", contact.contact_id)
    _child(entry, "FirstName", contact.first_name)
    _child(entry, "LastName", contact.last_name)
    _child(entry, "Department")
    _child(entry, "Primary", "0")
    _child(entry, "Frequent", "0")
    phone = _child(entry, "Phone", type="Work")
    _child(phone, "phonenumber", contact.phone)
    _child(phone, "accountindex", "0")
    _child(entry, "Mail", type="Work")
    _child(entry, "PhotoUrl")
    _child(entry, "RingtoneUrl")
    _child(entry, "RingtoneIndex", "0")


def render_address_book(contacts: Iterable[Contact]) -> str:
    """Render contacts as an ``<AddressBook>`` document with the default groups."""
    book = ET.Element("AddressBook")
    _child(book, "version", "1")
    for group_id, name in DEFAULT_GROUPS:
        _group(book, group_id, name)
    for contact in contacts:
        _contact(book, contact)
    ET.indent(book, space="  ")
    body = ET.tostring(book, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body
