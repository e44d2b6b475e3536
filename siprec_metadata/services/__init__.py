"""
Services package for siprec-metadata.
Contains the XML codec, integrity checking, graph export and logging.
"""

from .xml_codec import MetadataDecodeError, encode_document, decode_document
from .integrity_checker import IntegrityChecker, IntegrityReport, IntegrityIssue, IssueKind, IssueSeverity
from .graph_export import to_dot
from .logging_service import LoggingService, OperationType, LogLevel, get_logging_service, init_logging_service

__all__ = [
    'MetadataDecodeError',
    'encode_document',
    'decode_document',
    'IntegrityChecker',
    'IntegrityReport',
    'IntegrityIssue',
    'IssueKind',
    'IssueSeverity',
    'to_dot',
    'LoggingService',
    'OperationType',
    'LogLevel',
    'get_logging_service',
    'init_logging_service'
]
