"""
Graphviz DOT export of a recording session, for debugging.
"""

from typing import List


def _quote(value: str) -> str:
    return '"' + value.replace('\\', '\\\\').replace('"', '\\"') + '"'


def _node(kind: str, node_id: str, shape: str) -> str:
    quoted = _quote(node_id)
    # two-line label: kind over id
    return f'  {quoted} [shape={shape}, label="{kind}\\n{quoted[1:-1]}"];'


def _edge(source: str, target: str, label: str) -> str:
    return f"  {_quote(source)} -> {_quote(target)} [label={_quote(label)}];"


def to_dot(recording_session) -> str:
    """
    Describe the graph in DOT.

    One node per group, session, participant and stream; edges for group
    membership, stream ownership and participant associations.
    """
    lines: List[str] = ["digraph RecordingSession {"]

    for group in recording_session.groups:
        lines.append(_node("group", group.group_id, "folder"))

    for session in recording_session.comm_sessions:
        lines.append(_node("session", session.session_id, "box"))

    for participant in recording_session.participants:
        lines.append(_node("participant", participant.participant_id, "ellipse"))

    for stream in recording_session.media_streams:
        lines.append(_node("stream", stream.stream_id, "note"))

    for session in recording_session.comm_sessions:
        if session.group_ref is not None:
            lines.append(_edge(session.session_id, session.group_ref, "group-ref"))

    for stream in recording_session.media_streams:
        if stream.session_id:
            lines.append(_edge(stream.stream_id, stream.session_id, "session"))

    for assoc in recording_session.participant_session_associations:
        lines.append(_edge(assoc.participant_id, assoc.session_id, "participant"))

    for assoc in recording_session.participant_stream_associations:
        direction = "/".join(name for name, flag in (("send", assoc.send), ("recv", assoc.recv)) if flag)
        lines.append(_edge(assoc.participant_id, assoc.stream_id, direction or "none"))

    lines.append("}")
    return "\n".join(lines) + "\n"
