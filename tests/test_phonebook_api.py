import xml.etree.ElementTree as ET

import pytest
from fastapi.testclient import TestClient

from opsboard.config import get_settings
from opsboard.errors import TransportError
from opsboard.main import create_app
from opsboard.models.domain import Contact
from opsboard.persistence.contacts import FirestoreContactStore, get_contact_store


class InMemoryContactStore:
    def __init__(self, contacts):
        self.contacts = list(contacts)

    def list_contacts(self):
        return list(self.contacts)


@pytest.fixture
def contacts_client(settings_factory):
    def _build(store, **overrides):
        app = create_app()
        app.dependency_overrides[get_settings] = lambda: settings_factory(**overrides)
        if store is not None:
            app.dependency_overrides[get_contact_store] = lambda: store
        return TestClient(app)

    return _build


def test_contacts_export_renders_address_book(contacts_client):
    store = InMemoryContactStore(
        [
            Contact(contact_id="c1", first_name="Ana", last_name="García & Hijos", phone="600111222"),
            Contact(contact_id="c2", first_name="<Luis>", last_name="Pérez", phone="600333444"),
        ]
    )

    response = contacts_client(store).get("/api/contacts.xml")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    assert response.headers["Cache-Control"] == "s-maxage=60, stale-while-revalidate=300"
    assert response.text.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert "García &amp; Hijos" in response.text
    assert "&lt;Luis&gt;" in response.text

    book = ET.fromstring(response.content)
    assert book.tag == "AddressBook"
    assert [group.findtext("name") for group in book.findall("pbgroup")] == ["Default", "Blacklist"]
    contacts = book.findall("Contact")
    assert [contact.findtext("id") for contact in contacts] == ["c1", "c2"]
    assert contacts[0].find("Phone").get("type") == "Work"
    assert contacts[0].findtext("Phone/phonenumber") == "600111222"


def test_contacts_export_with_no_contacts_keeps_groups(contacts_client):
    response = contacts_client(InMemoryContactStore([])).get("/api/contacts.xml")

    book = ET.fromstring(response.content)
    assert book.findall("Contact") == []
    assert len(book.findall("pbgroup")) == 2


def test_contacts_export_without_store_configuration(contacts_client):
    response = contacts_client(None, firebase_key_base64=None).get("/api/contacts.xml")

    assert response.status_code == 500
    assert response.json() == {"error": "Contact store is not configured."}


def test_firestore_store_reads_documents():
    class Snapshot:
        def __init__(self, doc_id, data):
            self.id = doc_id
            self._data = data

        def to_dict(self):
            return self._data

    class Collection:
        def stream(self):
            return iter([Snapshot("a", {"firstName": "Ana", "phone": 600}), Snapshot("b", None)])

    class Client:
        def __init__(self):
            self.paths = []

        def collection(self, path):
            self.paths.append(path)
            return Collection()

    client = Client()
    store = FirestoreContactStore(client, "artifacts/app/public/data/contacts")

    contacts = store.list_contacts()

    assert client.paths == ["artifacts/app/public/data/contacts"]
    assert contacts[0] == Contact(contact_id="a", first_name="Ana", last_name="", phone="600")
    assert contacts[1].first_name == ""


def test_firestore_failures_become_transport_errors():
    from google.api_core.exceptions import ServiceUnavailable

    class Client:
        def collection(self, path):
            raise ServiceUnavailable("firestore down")

    with pytest.raises(TransportError):
        FirestoreContactStore(Client(), "contacts").list_contacts()


def test_phonebook_file_is_served_as_attachment(tmp_path, contacts_client):
    book = tmp_path / "phonebook.xml"
    book.write_text("<AddressBook><version>1</version></AddressBook>", encoding="utf-8")

    response = contacts_client(None, phonebook_file=book).get("/api/phonebook.xml")

    assert response.status_code == 200
    assert response.text == "<AddressBook><version>1</version></AddressBook>"
    assert response.headers["content-type"].startswith("application/xml")
    assert response.headers["content-disposition"] == 'attachment; filename="phonebook.xml"'


def test_missing_phonebook_file_is_404(tmp_path, contacts_client):
    response = contacts_client(None, phonebook_file=tmp_path / "missing.xml").get("/api/phonebook.xml")

    assert response.status_code == 404
    assert response.json() == {"error": "Phonebook file not found."}
