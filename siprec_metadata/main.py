"""
Command line entry point for siprec-metadata.

Reads SIPREC metadata documents from files and validates, reformats,
summarizes or graphs them.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, List

from .config import config
from .models.recording_session import RecordingSession
from .services.logging_service import LogLevel, OperationType, init_logging_service
from .services.xml_codec import MetadataDecodeError

EXIT_OK = 0
EXIT_INTEGRITY_FAILED = 1
EXIT_DECODE_FAILED = 2


def load_document(path: str, logging_service) -> Optional[RecordingSession]:
    """Read and decode a metadata document; None when it cannot be loaded."""
    try:
        xml_content = Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        logging_service.log_decode_failure(str(e), source=path)
        return None

    try:
        recording_session = RecordingSession.from_xml(xml_content)
    except MetadataDecodeError as e:
        print(f"Cannot decode {path}: {e}", file=sys.stderr)
        logging_service.log_decode_failure(str(e), source=path)
        return None

    logging_service.log_document_decoded(recording_session, source=path)
    return recording_session


def cmd_validate(args, logging_service) -> int:
    """Decode a document and run the integrity check."""
    recording_session = load_document(args.file, logging_service)
    if recording_session is None:
        return EXIT_DECODE_FAILED

    report = recording_session.check_report()
    logging_service.log_integrity_result(report, source=args.file)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        for issue in report.issues:
            print(str(issue))
        print("OK" if report.is_valid else "INVALID")

    return EXIT_OK if report.is_valid else EXIT_INTEGRITY_FAILED


def cmd_format(args, logging_service) -> int:
    """Re-encode a document in canonical form."""
    recording_session = load_document(args.file, logging_service)
    if recording_session is None:
        return EXIT_DECODE_FAILED

    document = recording_session.to_xml()
    logging_service.log_document_encoded(recording_session, len(document.encode('utf-8')))
    sys.stdout.write(document)
    return EXIT_OK


def cmd_dot(args, logging_service) -> int:
    """Print the Graphviz view of a document."""
    recording_session = load_document(args.file, logging_service)
    if recording_session is None:
        return EXIT_DECODE_FAILED

    sys.stdout.write(recording_session.to_dot())
    logging_service.log_operation(
        OperationType.EXPORT,
        "Graph exported",
        LogLevel.INFO,
        context={'action': 'dot', 'source': args.file}
    )
    return EXIT_OK


def cmd_summary(args, logging_service) -> int:
    """Print a JSON summary of a document."""
    recording_session = load_document(args.file, logging_service)
    if recording_session is None:
        return EXIT_DECODE_FAILED

    print(recording_session.summary().model_dump_json(indent=2))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='siprec-metadata',
        description='SIPREC (RFC 7865) recording metadata tool'
    )
    parser.add_argument('--debug', '-d', action='store_true', help='Enable DEBUG logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    validate_parser = subparsers.add_parser('validate', help='Decode a document and check references')
    validate_parser.add_argument('file', help='Metadata XML file')
    validate_parser.add_argument('--json', action='store_true', help='Print the report as JSON')
    validate_parser.set_defaults(handler=cmd_validate)

    format_parser = subparsers.add_parser('format', help='Re-encode a document in canonical form')
    format_parser.add_argument('file', help='Metadata XML file')
    format_parser.set_defaults(handler=cmd_format)

    dot_parser = subparsers.add_parser('dot', help='Print a Graphviz view of a document')
    dot_parser.add_argument('file', help='Metadata XML file')
    dot_parser.set_defaults(handler=cmd_dot)

    summary_parser = subparsers.add_parser('summary', help='Print a JSON summary of a document')
    summary_parser.add_argument('file', help='Metadata XML file')
    summary_parser.set_defaults(handler=cmd_summary)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, 'handler', None):
        parser.print_help()
        return EXIT_DECODE_FAILED

    try:
        config.validate_config()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_DECODE_FAILED

    config.ensure_directories()
    logging_service = init_logging_service(
        log_dir=config.LOG_DIR,
        log_level='DEBUG' if args.debug else config.LOG_LEVEL,
        log_to_file=config.LOG_TO_FILE
    )

    logging_service.log_system_startup()
    try:
        return args.handler(args, logging_service)
    finally:
        logging_service.log_system_shutdown()


if __name__ == "__main__":
    sys.exit(main())
