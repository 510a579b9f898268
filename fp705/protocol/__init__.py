"""
Protocol layer for FP705 communication.

This module contains the low-level protocol handling:
- Command codes and protocol constants
- Nibble encoding of length, command and BCC fields
- BCC calculation
- Host frame construction
- Reply frame parsing
- Status byte decoding
"""

from fp705.protocol.checksums import calculate_bcc, encode_bcc, frame_bcc
from fp705.protocol.constants import CommandCode, ProtocolConstants
from fp705.protocol.encoding import (
    decode_payload,
    decode_word,
    encode_payload,
    encode_word,
    params,
)
from fp705.protocol.frame_builder import (
    build_packet,
    build_reply,
    frame_length,
    next_sequence,
)
from fp705.protocol.frame_reader import MIN_REPLY_SIZE, Response, parse_response
from fp705.protocol.status import STATUS_TABLE, Status, decode_status

__all__ = [
    # Constants
    "CommandCode",
    "ProtocolConstants",
    # Checksums
    "calculate_bcc",
    "encode_bcc",
    "frame_bcc",
    # Encoding
    "encode_word",
    "decode_word",
    "encode_payload",
    "decode_payload",
    "params",
    # Frame Building
    "build_packet",
    "build_reply",
    "frame_length",
    "next_sequence",
    # Frame Parsing
    "Response",
    "parse_response",
    "MIN_REPLY_SIZE",
    # Status
    "Status",
    "STATUS_TABLE",
    "decode_status",
]
