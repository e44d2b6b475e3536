"""
XML codec for SIPREC recording metadata (RFC 7865).

Every entity and association type has an ``encode_*`` function that appends
its element under a parent and a ``decode_*`` function that builds it back
from an element. ``encode_document`` and ``decode_document`` handle a whole
``<recording>`` document.

Encoding is deterministic: element order, attribute order and indentation
are fixed so documents compare byte for byte. Decoding looks children up by
local tag name and does not depend on their order.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Iterator, List, Optional

from ..config import config
from ..models.associations import CSRSAssociation, ParticipantSessionAssociation, ParticipantStreamAssociation
from ..models.communication_session import CommunicationSession, CommunicationSessionGroup
from ..models.media_stream import MediaStream
from ..models.participant import Participant
from ..models.recording_session import RecordingSession, merge_participant_stream
from ..utils.time_utils import Timestamp
from ..utils.unique_id import UniqueIdGenerator

logger = logging.getLogger(__name__)

RECORDING_NAMESPACE = "urn:ietf:params:xml:ns:recording:1"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
INDENT = "  "


class MetadataDecodeError(ValueError):
    """Raised when a metadata document cannot be decoded."""


# Tree helpers

def _local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from a tag."""
    if tag.startswith("{"):
        return tag.rsplit("}", 1)[1]
    return tag


def _children(element: ET.Element, name: str) -> Iterator[ET.Element]:
    """Child elements with the given local name, in document order."""
    for child in element:
        if isinstance(child.tag, str) and _local_name(child.tag) == name:
            yield child


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    return next(_children(element, name), None)


def _text(element: ET.Element) -> str:
    return element.text or ""


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    child = _child(element, name)
    return _text(child) if child is not None else None


def _child_time(element: ET.Element, name: str) -> Optional[Timestamp]:
    text = _child_text(element, name)
    return Timestamp.from_rfc3339(text) if text is not None else None


def _append_text(parent: ET.Element, name: str, text: str) -> ET.Element:
    child = ET.SubElement(parent, name)
    child.text = text
    return child


def _append_time(parent: ET.Element, name: str, value: Optional[Timestamp]):
    if value is not None:
        _append_text(parent, name, value.to_rfc3339())


def _missing(element: ET.Element, attribute: str) -> bool:
    if element.get(attribute) is None:
        logger.warning(f"<{_local_name(element.tag)}> is missing required attribute '{attribute}'")
        return True
    return False


# Encoders

def encode_group(group: CommunicationSessionGroup, parent: ET.Element) -> ET.Element:
    node = ET.SubElement(parent, "group")
    node.set("group_id", group.group_id)
    _append_time(node, "associate-time", group.associate_time)
    _append_time(node, "disassociate-time", group.disassociate_time)
    return node


def encode_comm_session(session: CommunicationSession, parent: ET.Element) -> ET.Element:
    node = ET.SubElement(parent, "session")
    node.set("session_id", session.session_id)

    if session.reason is not None:
        _append_text(node, "reason", session.reason)

    _append_time(node, "start-time", session.start_time)
    _append_time(node, "stop-time", session.stop_time)

    for sip_session_id in session.sip_session_ids:
        _append_text(node, "sipSessionID", sip_session_id)

    if session.group_ref is not None:
        _append_text(node, "group-ref", session.group_ref)

    return node


def encode_participant(participant: Participant, parent: ET.Element,
                       name_language: Optional[str] = None) -> ET.Element:
    """
    Encode a participant.

    Each (name, AoR) pair becomes a ``nameID`` element carrying the AoR; the
    ``name`` child is left out when the display name is empty.
    """
    language = name_language or config.NAME_LANGUAGE

    node = ET.SubElement(parent, "participant")
    node.set("participant_id", participant.participant_id)

    for name, aor in participant.name_ids:
        name_id_node = ET.SubElement(node, "nameID")
        name_id_node.set("aor", aor)
        if name:
            name_node = ET.SubElement(name_id_node, "name")
            name_node.set("xml:lang", language)
            name_node.text = name

    return node


def encode_stream(stream: MediaStream, parent: ET.Element) -> ET.Element:
    node = ET.SubElement(parent, "stream")
    node.set("stream_id", stream.stream_id)
    node.set("session_id", stream.session_id)

    if stream.label is not None:
        _append_text(node, "label", stream.label)

    if stream.content_type is not None:
        _append_text(node, "content-type", stream.content_type)

    return node


def encode_csrs_association(association: CSRSAssociation, parent: ET.Element) -> ET.Element:
    node = ET.SubElement(parent, "sessionrecordingassoc")
    node.set("session_id", association.session_id)
    _append_text(node, "associate-time", association.associate_time.to_rfc3339())
    _append_time(node, "disassociate-time", association.disassociate_time)
    return node


def encode_participant_session_association(association: ParticipantSessionAssociation,
                                           parent: ET.Element) -> ET.Element:
    node = ET.SubElement(parent, "participantsessionassoc")
    node.set("participant_id", association.participant_id)
    node.set("session_id", association.session_id)
    _append_text(node, "associate-time", association.associate_time.to_rfc3339())
    _append_time(node, "disassociate-time", association.disassociate_time)

    for param in association.params:
        _append_text(node, "param", param)

    return node


def encode_participant_stream_associations(participant_id: str,
                                           associations: List[ParticipantStreamAssociation],
                                           parent: ET.Element) -> ET.Element:
    """
    Encode one ``participantstreamassoc`` block for a participant.

    The block lists the participant's edges in association order, each as a
    ``send`` and/or ``recv`` element holding the stream id.
    """
    node = ET.SubElement(parent, "participantstreamassoc")
    node.set("participant_id", participant_id)

    for association in associations:
        if association.participant_id != participant_id:
            continue
        if association.send:
            _append_text(node, "send", association.stream_id)
        if association.recv:
            _append_text(node, "recv", association.stream_id)

    return node


# Decoders

def decode_group(node: ET.Element) -> Optional[CommunicationSessionGroup]:
    if _missing(node, "group_id"):
        return None

    group = CommunicationSessionGroup(node.get("group_id"))
    group.associate_time = _child_time(node, "associate-time")
    group.disassociate_time = _child_time(node, "disassociate-time")
    return group


def decode_comm_session(node: ET.Element) -> Optional[CommunicationSession]:
    if _missing(node, "session_id"):
        return None

    session = CommunicationSession(node.get("session_id"))
    session.reason = _child_text(node, "reason")
    session.group_ref = _child_text(node, "group-ref")
    session.start_time = _child_time(node, "start-time")
    session.stop_time = _child_time(node, "stop-time")

    for sip_session_node in _children(node, "sipSessionID"):
        session.add_sip_session_id(_text(sip_session_node))

    return session


def decode_participant(node: ET.Element) -> Optional[Participant]:
    if _missing(node, "participant_id"):
        return None

    participant = Participant(node.get("participant_id"))

    for name_id_node in _children(node, "nameID"):
        aor = name_id_node.get("aor", "")
        name = _child_text(name_id_node, "name") or ""
        participant.add_name_id(name, aor)

    return participant


def decode_stream(node: ET.Element) -> Optional[MediaStream]:
    if _missing(node, "stream_id") or _missing(node, "session_id"):
        return None

    stream = MediaStream(node.get("stream_id"), session_id=node.get("session_id"))
    stream.label = _child_text(node, "label")
    stream.content_type = _child_text(node, "content-type")
    return stream


def decode_csrs_association(node: ET.Element) -> Optional[CSRSAssociation]:
    if _missing(node, "session_id"):
        return None

    association = CSRSAssociation(session_id=node.get("session_id"))
    associate_time = _child_time(node, "associate-time")
    if associate_time is not None:
        association.associate_time = associate_time
    association.disassociate_time = _child_time(node, "disassociate-time")
    return association


def decode_participant_session_association(node: ET.Element) -> Optional[ParticipantSessionAssociation]:
    if _missing(node, "participant_id") or _missing(node, "session_id"):
        return None

    association = ParticipantSessionAssociation(
        participant_id=node.get("participant_id"),
        session_id=node.get("session_id")
    )
    associate_time = _child_time(node, "associate-time")
    if associate_time is not None:
        association.associate_time = associate_time
    association.disassociate_time = _child_time(node, "disassociate-time")

    for param_node in _children(node, "param"):
        association.add_param(_text(param_node))

    return association


def decode_participant_stream_associations(node: ET.Element,
                                           associations: List[ParticipantStreamAssociation]) -> bool:
    """
    Merge one ``participantstreamassoc`` block into ``associations``.

    ``send`` and ``recv`` children are taken in document order so that edges
    come back in the order they were encoded. Returns False when the block
    has no ``participant_id``.
    """
    if _missing(node, "participant_id"):
        return False

    participant_id = node.get("participant_id")

    for child in node:
        if not isinstance(child.tag, str):
            continue
        direction = _local_name(child.tag)
        if direction == "send":
            merge_participant_stream(associations, participant_id, _text(child), True, False)
        elif direction == "recv":
            merge_participant_stream(associations, participant_id, _text(child), False, True)

    return True


# Documents

def encode_document(session: RecordingSession, name_language: Optional[str] = None) -> str:
    """Serialize a recording session to an indented UTF-8 XML document."""
    root = ET.Element("recording")
    root.set("xmlns", RECORDING_NAMESPACE)

    _append_text(root, "datamode", session.data_mode)
    _append_time(root, "start-time", session.start_time)
    _append_time(root, "end-time", session.end_time)

    for group in session.groups:
        encode_group(group, root)

    for comm_session in session.comm_sessions:
        encode_comm_session(comm_session, root)

    for participant in session.participants:
        encode_participant(participant, root, name_language)

    for stream in session.media_streams:
        encode_stream(stream, root)

    for association in session.csrs_associations:
        encode_csrs_association(association, root)

    for association in session.participant_session_associations:
        encode_participant_session_association(association, root)

    for participant in session.participants:
        encode_participant_stream_associations(
            participant.participant_id,
            session.participant_stream_associations,
            root
        )

    ET.indent(root, space=INDENT)
    body = ET.tostring(root, encoding="unicode")
    # A raw CR would come back as LF after end-of-line normalization
    body = body.replace("\r", "&#13;")
    document = XML_DECLARATION + body + "\n"

    logger.debug(
        f"Encoded recording with {len(session.comm_sessions)} sessions, "
        f"{len(session.participants)} participants, {len(session.media_streams)} streams"
    )
    return document


_ENTITY_DECODERS = [
    ("group", decode_group, "groups"),
    ("session", decode_comm_session, "comm_sessions"),
    ("participant", decode_participant, "participants"),
    ("stream", decode_stream, "media_streams"),
    ("sessionrecordingassoc", decode_csrs_association, "csrs_associations"),
    ("participantsessionassoc", decode_participant_session_association, "participant_session_associations"),
]


def decode_document(xml_content: str,
                    id_generator: Optional[UniqueIdGenerator] = None) -> RecordingSession:
    """
    Decode an XML document into a new recording session.

    The session is built from scratch, so a failure never leaves a partially
    populated session behind.

    Raises:
        MetadataDecodeError: if the text is not well-formed XML, the root is
            not ``recording``, or any element lacks a required attribute.
    """
    try:
        root = ET.fromstring(xml_content)
    except ET.ParseError as e:
        raise MetadataDecodeError(f"Malformed XML: {e}") from e

    if _local_name(root.tag) != "recording":
        raise MetadataDecodeError(f"Expected root element <recording>, got <{_local_name(root.tag)}>")

    session = RecordingSession(id_generator=id_generator)

    data_mode = _child_text(root, "datamode")
    if data_mode is not None:
        session.data_mode = data_mode
    session.start_time = _child_time(root, "start-time")
    session.end_time = _child_time(root, "end-time")

    for tag, decoder, collection_name in _ENTITY_DECODERS:
        collection = getattr(session, collection_name)
        for index, node in enumerate(_children(root, tag)):
            entity = decoder(node)
            if entity is None:
                raise MetadataDecodeError(f"Invalid <{tag}> element at position {index}")
            collection.append(entity)

    for index, node in enumerate(_children(root, "participantstreamassoc")):
        if not decode_participant_stream_associations(node, session.participant_stream_associations):
            raise MetadataDecodeError(f"Invalid <participantstreamassoc> element at position {index}")

    logger.debug(
        f"Decoded recording with {len(session.comm_sessions)} sessions, "
        f"{len(session.participants)} participants, {len(session.media_streams)} streams"
    )
    return session
