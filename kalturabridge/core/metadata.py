"""Custom Metadata Module.

Kaltura custom metadata is stored as one XML document per entry and metadata
profile. The profile publishes an XSD listing its fields; this module reflects
that XSD into a field schema and uses it to write and read the documents.
"""

from __future__ import annotations

import threading
import weakref
from collections.abc import Iterable, Iterator, Mapping, Set
from typing import Any
from xml.etree import ElementTree
from xml.sax.saxutils import escape

from KalturaClient.Plugins.Metadata import (
    KalturaMetadataFilter,
    KalturaMetadataObjectType,
)

from kalturabridge import log
from kalturabridge.config.settings import MetadataConfig
from kalturabridge.core.session import KalturaSession
from kalturabridge.exceptions import (
    MetadataAccessError,
    ProviderListNotFoundError,
    SchemaParseError,
    SessionInitError,
)
from kalturabridge.utils.kaltura import defined

__all__ = [
    "FieldSchema",
    "MetadataSchemaSync",
    "derive_field_schema",
    "parse_metadata",
    "serialize_metadata",
]

XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema"

# Element names containing this marker, in any case, are containers
CONTAINER_MARKER = "metadata"
PROVIDER_MARKER = "Provider"

# Locks are dropped once no replacement holds or waits on them
_record_locks: weakref.WeakValueDictionary[tuple[str, int], threading.Lock] = (
    weakref.WeakValueDictionary()
)
_record_locks_guard = threading.Lock()


def _record_lock(object_id: str, profile_id: int) -> threading.Lock:
    """Get the process-wide lock serializing replacements of one record."""
    key = (str(object_id), int(profile_id))
    with _record_locks_guard:
        lock = _record_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _record_locks[key] = lock
        return lock


def _is_xsd(elem: ElementTree.Element, local_name: str) -> bool:
    return elem.tag in (f"{{{XSD_NAMESPACE}}}{local_name}", local_name)


class FieldSchema(Set):
    """The writable field names of a metadata profile.

    Compares equal to any set holding the same names, and iterates in the
    order the fields are declared in the XSD.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: tuple[str, ...] = tuple(dict.fromkeys(names))

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    __hash__ = Set._hash

    def __repr__(self) -> str:
        return f"FieldSchema({list(self._names)!r})"


def _parse_xml(document: Any) -> ElementTree.Element:
    """Parse an XML string, raising ``ElementTree.ParseError`` on bad input."""
    document = defined(document)
    if not isinstance(document, str) or not document.strip():
        raise ElementTree.ParseError("empty or missing XML document")
    return ElementTree.fromstring(document)


def derive_field_schema(
    xsd: str | None, profile_id: int | None = None, strict: bool = False
) -> FieldSchema:
    """Derive the writable field names from a metadata profile XSD.

    Every ``xsd:element`` declaration with a ``name`` attribute that does not
    contain "metadata" (case-insensitively) is a field.

    Args:
        xsd (str | None): The profile's XML Schema document.
        profile_id (int | None): Profile the XSD belongs to, for logging.
        strict (bool): Raise instead of returning an empty schema when the XSD
            cannot be parsed.

    Returns:
        FieldSchema: The field names in declaration order.

    Raises:
        SchemaParseError: If ``strict`` is set and the XSD is not well-formed.
    """
    try:
        root = _parse_xml(xsd)
    except ElementTree.ParseError as e:
        if strict:
            raise SchemaParseError(
                f"Metadata profile {profile_id} has an unparseable XSD"
            ) from e
        log.warning(
            f"Could not parse the XSD of metadata profile $$'{profile_id}'$$, "
            f"no metadata fields will be written: {e}"
        )
        return FieldSchema()

    names = (
        elem.get("name", "")
        for elem in root.iter()
        if _is_xsd(elem, "element")
    )
    return FieldSchema(
        name for name in names if name and CONTAINER_MARKER not in name.lower()
    )


def serialize_metadata(
    fields: Mapping[str, Any], schema: Iterable[str], escape_values: bool = True
) -> str:
    """Serialize field values into a Kaltura metadata document.

    Only names in ``schema`` are written, in schema order; other keys in
    ``fields`` are dropped.

    Args:
        fields (Mapping[str, Any]): Proposed field values.
        schema (Iterable[str]): The profile's field names.
        escape_values (bool): XML-escape values. When False values are
            inserted verbatim.

    Returns:
        str: The ``<metadata>...</metadata>`` document.
    """
    parts = ["<metadata>"]
    for name in schema:
        if name not in fields or fields[name] is None:
            continue
        value = str(fields[name])
        parts.append(f"<{name}>{escape(value) if escape_values else value}</{name}>")
    parts.append("</metadata>")
    return "".join(parts)


def parse_metadata(xml: str) -> dict[str, str]:
    """Parse a metadata document into a field name to value mapping.

    Raises:
        xml.etree.ElementTree.ParseError: If the document is not well-formed.
    """
    root = _parse_xml(xml)
    return {child.tag: child.text or "" for child in root}


class MetadataSchemaSync:
    """Reads and replaces the custom metadata document of media entries.

    Attributes:
        session: Session used when no client is passed in.
        config: Metadata profile settings.
    """

    def __init__(self, session: KalturaSession, config: MetadataConfig) -> None:
        self.session = session
        self.config = config

    @property
    def profile_id(self) -> int:
        return self.config.profile_id

    def fetch_xsd(self, client: Any, profile_id: int | None = None) -> str | None:
        """Fetch the XSD of a metadata profile.

        Raises:
            MetadataAccessError: If the profile could not be read.
        """
        profile_id = self.profile_id if profile_id is None else profile_id
        try:
            fields = client.metadata.metadataProfile.listFields(profile_id)
            log.debug(
                f"Metadata profile $$'{profile_id}'$$ declares "
                f"{len(defined(fields.objects, []))} field(s)"
            )
            xsd = client.metadata.metadataProfile.get(profile_id).xsd
        except Exception as e:
            log.error(f"fetch_xsd - {e}")
            raise MetadataAccessError(
                f"Could not read metadata profile {profile_id}"
            ) from e
        return defined(xsd)

    def fetch_field_schema(self, client: Any, profile_id: int | None = None) -> FieldSchema:
        """Fetch a profile's XSD and derive its field schema."""
        profile_id = self.profile_id if profile_id is None else profile_id
        return derive_field_schema(
            self.fetch_xsd(client, profile_id),
            profile_id,
            strict=self.config.strict_schema,
        )

    def _list_records(
        self, client: Any, object_id: str, profile_id: int
    ) -> list[Any]:
        metadata_filter = KalturaMetadataFilter()
        metadata_filter.objectIdEqual = object_id
        metadata_filter.metadataProfileIdEqual = profile_id
        result = client.metadata.metadata.list(metadata_filter)
        return list(defined(result.objects, []))

    def replace_metadata_record(
        self, client: Any, profile_id: int, object_id: str, serialized_doc: str
    ) -> Any:
        """Replace the metadata record of an entry with a new document.

        The first existing record of the entry under ``profile_id`` is
        deleted before the new one is added. Records of other profiles are
        left alone. The two calls are not atomic: if the add fails the entry is
        left without a record.

        Args:
            client (KalturaClient): Authenticated client.
            profile_id (int): Metadata profile of the new record.
            object_id (str): Entry the record belongs to.
            serialized_doc (str): The metadata document.

        Returns:
            KalturaMetadata: The created record.

        Raises:
            MetadataAccessError: If listing, deleting or adding fails.
        """
        with _record_lock(object_id, profile_id):
            try:
                records = self._list_records(client, object_id, profile_id)
                if records:
                    record_id = records[0].id
                    client.metadata.metadata.delete(record_id)
                    log.debug(
                        f"Deleted metadata record $$'{record_id}'$$ of entry "
                        f"$$'{object_id}'$$"
                    )
            except Exception as e:
                log.error(f"replace_metadata_record - {e}")
                raise MetadataAccessError(
                    f"Could not clear the metadata of entry {object_id}"
                ) from e

            try:
                record = client.metadata.metadata.add(
                    profile_id,
                    KalturaMetadataObjectType.ENTRY,
                    object_id,
                    serialized_doc,
                )
            except Exception as e:
                log.error(
                    f"replace_metadata_record - entry $$'{object_id}'$$ has no "
                    f"metadata record after a failed add: {e}"
                )
                raise MetadataAccessError(
                    f"Could not add metadata to entry {object_id}"
                ) from e

        log.debug(
            f"Stored metadata of entry $$'{object_id}'$$ "
            f"$${{profile_id: {profile_id}}}$$"
        )
        return record

    def read_metadata_record(self, client: Any, object_id: str) -> dict[str, str]:
        """Read the metadata fields of an entry under the configured profile.

        The first record carrying an XML payload is parsed.

        Returns:
            dict[str, str]: The stored fields, empty if the entry has no record.

        Raises:
            MetadataAccessError: If the records could not be listed.
        """
        try:
            records = self._list_records(client, object_id, self.profile_id)
        except Exception as e:
            log.error(f"read_metadata_record - {e}")
            raise MetadataAccessError(
                f"Could not read the metadata of entry {object_id}"
            ) from e

        xml = next(
            (
                payload
                for payload in (defined(getattr(r, "xml", None)) for r in records)
                if payload
            ),
            None,
        )
        if xml is None:
            return {}

        try:
            return parse_metadata(xml)
        except ElementTree.ParseError as e:
            log.warning(
                f"Stored metadata of entry $$'{object_id}'$$ is not valid XML: {e}"
            )
            return {}

    def update_metadata(
        self, client: Any, fields: Mapping[str, Any], object_id: str
    ) -> str:
        """Write the profile's fields from ``fields`` as the entry's metadata.

        Returns:
            str: The document that was stored.

        Raises:
            MetadataAccessError: If the profile or the record could not be accessed.
            SchemaParseError: If strict schema mode is on and the XSD is invalid.
        """
        schema = self.fetch_field_schema(client)
        document = serialize_metadata(
            fields, schema, escape_values=self.config.escape_values
        )
        dropped = [name for name in fields if name not in schema]
        if dropped:
            log.debug(
                f"Ignoring fields not in metadata profile $$'{self.profile_id}'$$ "
                f"$${{fields: {dropped}}}$$"
            )
        self.replace_metadata_record(client, self.profile_id, object_id, document)
        return document

    def get_metadata(self, object_id: str, client: Any | None = None) -> dict[str, str]:
        """Read an entry's metadata, opening a session if no client is given.

        Raises:
            SessionInitError: If a session had to be started and could not be.
            MetadataAccessError: If the records could not be listed.
        """
        if client is None:
            client = self.session.open()
        return self.read_metadata_record(client, object_id)

    def get_provider_list(self) -> list[str]:
        """List the allowed values of the profile's ``Provider`` field.

        Returns:
            list[str]: The enumeration values in declaration order; empty if
                the XSD has no enumerated provider field.

        Raises:
            ProviderListNotFoundError: If the profile could not be read.
        """
        try:
            xsd = self.fetch_xsd(self.session.open())
        except (SessionInitError, MetadataAccessError) as e:
            log.error(f"get_provider_list - {e}")
            raise ProviderListNotFoundError(
                "Error retrieving the provider list from Kaltura."
            ) from e

        try:
            root = _parse_xml(xsd)
        except ElementTree.ParseError as e:
            log.warning(f"Could not parse the XSD for the provider list: {e}")
            return []

        # First restriction under any Provider element, text fields have none
        restriction = next(
            (
                child
                for elem in root.iter()
                if _is_xsd(elem, "element") and PROVIDER_MARKER in elem.get("name", "")
                for simple_type in elem
                if _is_xsd(simple_type, "simpleType")
                for child in simple_type
                if _is_xsd(child, "restriction")
            ),
            None,
        )
        if restriction is None:
            return []

        values = (option.get("value") for option in restriction)
        return list(dict.fromkeys(value for value in values if value is not None))
