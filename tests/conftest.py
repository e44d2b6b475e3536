"""
Pytest configuration and fixtures for testing.
"""

import logging
import random

import pytest

from siprec_metadata.models.recording_session import RecordingSession
from siprec_metadata.utils.unique_id import UniqueIdGenerator


LOGGER_NAMES = [
    'siprec_metadata',
    'siprec_metadata.codec',
    'siprec_metadata.validation',
    'siprec_metadata.export',
    'siprec_metadata.system',
    'siprec_metadata.errors',
]


REFERENCE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<recording xmlns="urn:ietf:params:xml:ns:recording:1">
  <datamode>complete</datamode>
  <group group_id="7+OTCyoxTmqmqyA/1weDAg==">
    <associate-time>2010-12-16T23:41:07Z</associate-time>
  </group>
  <session session_id="hVpd7YQgRW2nD22h7q60JQ==">
    <sipSessionID>ab30317f1a784dc48ff824d0d3715d86;remote=47755a9de7794ba387653f2099600ef2</sipSessionID>
    <group-ref>7+OTCyoxTmqmqyA/1weDAg==</group-ref>
  </session>
  <participant participant_id="srfBElmCRp2QB23b7Mpk0w==">
    <nameID aor="sip:bob@biloxi.com">
      <name xml:lang="it">Bob</name>
    </nameID>
  </participant>
  <participant participant_id="zSfPoSvdSDCmU3A3TRDxAw==">
    <nameID aor="sip:Paul@biloxi.com">
      <name xml:lang="it">Paul</name>
    </nameID>
  </participant>
  <stream stream_id="UAAMm5GRQKSCMVvLyl4rFw==" session_id="hVpd7YQgRW2nD22h7q60JQ==">
    <label>96</label>
  </stream>
  <stream stream_id="i1Pz3to5hGk8fuXl+PbwCw==" session_id="hVpd7YQgRW2nD22h7q60JQ==">
    <label>97</label>
  </stream>
  <stream stream_id="8zc6e0lYTlWIINA6GR+3ag==" session_id="hVpd7YQgRW2nD22h7q60JQ==">
    <label>98</label>
  </stream>
  <stream stream_id="EiXGlc+4TruqqoDaNE76ag==" session_id="hVpd7YQgRW2nD22h7q60JQ==">
    <label>99</label>
  </stream>
  <sessionrecordingassoc session_id="hVpd7YQgRW2nD22h7q60JQ==">
    <associate-time>2010-12-16T23:41:07Z</associate-time>
  </sessionrecordingassoc>
  <participantsessionassoc participant_id="srfBElmCRp2QB23b7Mpk0w==" session_id="hVpd7YQgRW2nD22h7q60JQ==">
    <associate-time>2010-12-16T23:41:07Z</associate-time>
  </participantsessionassoc>
  <participantsessionassoc participant_id="zSfPoSvdSDCmU3A3TRDxAw==" session_id="hVpd7YQgRW2nD22h7q60JQ==">
    <associate-time>2010-12-16T23:41:07Z</associate-time>
  </participantsessionassoc>
  <participantstreamassoc participant_id="srfBElmCRp2QB23b7Mpk0w==">
    <send>UAAMm5GRQKSCMVvLyl4rFw==</send>
    <send>i1Pz3to5hGk8fuXl+PbwCw==</send>
    <recv>8zc6e0lYTlWIINA6GR+3ag==</recv>
    <recv>EiXGlc+4TruqqoDaNE76ag==</recv>
  </participantstreamassoc>
  <participantstreamassoc participant_id="zSfPoSvdSDCmU3A3TRDxAw==">
    <recv>UAAMm5GRQKSCMVvLyl4rFw==</recv>
    <recv>i1Pz3to5hGk8fuXl+PbwCw==</recv>
    <send>8zc6e0lYTlWIINA6GR+3ag==</send>
    <send>EiXGlc+4TruqqoDaNE76ag==</send>
  </participantstreamassoc>
</recording>
"""


def build_reference_session() -> RecordingSession:
    """Two participants talking over four streams of one grouped session."""
    recording_session = RecordingSession()
    recording_session.set_data_mode("complete")

    group = recording_session.add_group("7+OTCyoxTmqmqyA/1weDAg==")
    group.set_associate_time("2010-12-16T23:41:07Z")

    comm_session = recording_session.add_comm_session("hVpd7YQgRW2nD22h7q60JQ==")
    comm_session.add_sip_session_id("ab30317f1a784dc48ff824d0d3715d86;remote=47755a9de7794ba387653f2099600ef2")
    recording_session.associate_group(group, comm_session)

    bob = recording_session.add_participant("srfBElmCRp2QB23b7Mpk0w==")
    bob.add_name_id("Bob", "sip:bob@biloxi.com")

    paul = recording_session.add_participant("zSfPoSvdSDCmU3A3TRDxAw==")
    paul.add_name_id("Paul", "sip:Paul@biloxi.com")

    streams = []
    for stream_id, label in [("UAAMm5GRQKSCMVvLyl4rFw==", "96"),
                             ("i1Pz3to5hGk8fuXl+PbwCw==", "97"),
                             ("8zc6e0lYTlWIINA6GR+3ag==", "98"),
                             ("EiXGlc+4TruqqoDaNE76ag==", "99")]:
        stream = recording_session.add_stream(stream_id)
        stream.label = label
        recording_session.associate_stream(comm_session, stream)
        streams.append(stream)

    recording_session.associate_recording(comm_session).set_associate_time("2010-12-16T23:41:07Z")
    recording_session.associate_participant(comm_session, bob).set_associate_time("2010-12-16T23:41:07Z")
    recording_session.associate_participant(comm_session, paul).set_associate_time("2010-12-16T23:41:07Z")

    recording_session.associate_participant_stream(bob, streams[0], True, False)
    recording_session.associate_participant_stream(bob, streams[1], True, False)
    recording_session.associate_participant_stream(bob, streams[2], False, True)
    recording_session.associate_participant_stream(bob, streams[3], False, True)

    recording_session.associate_participant_stream(paul, streams[0], False, True)
    recording_session.associate_participant_stream(paul, streams[1], False, True)
    recording_session.associate_participant_stream(paul, streams[2], True, False)
    recording_session.associate_participant_stream(paul, streams[3], True, False)

    return recording_session


@pytest.fixture
def reference_xml():
    """Expected encoding of the reference session."""
    return REFERENCE_XML


@pytest.fixture
def reference_session():
    """Reference recording session built through the mutation API."""
    return build_reference_session()


@pytest.fixture
def seeded_generator():
    """Identifier generator with reproducible output."""
    return UniqueIdGenerator(random.Random(1234))


@pytest.fixture
def log_dir(tmp_path):
    """Temporary directory for log files."""
    path = tmp_path / "logs"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def reset_logging():
    """Detach handlers installed by a LoggingService during a test."""
    yield
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
