"""Generic netlink transport used by generated bindings."""

import errno
import os
import socket
import struct
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import IntFlag
from typing import Protocol

from . import uapi
from .attributes import AttributeDecoder, AttributeEncoder

_NLMSG_HEADER = struct.Struct("=IHHII")
_GENL_HEADER = struct.Struct("=BBH")
_ERROR_CODE = struct.Struct("=i")

_DEFAULT_BUFSIZE = 32768


class ProtocolError(RuntimeError):
    """Raised when a netlink exchange produces malformed messages."""


class ReplyError(ProtocolError):
    """Raised when a reply does not have the expected cardinality."""


class NetlinkError(OSError):
    """An error reported by the kernel in an NLMSG_ERROR message."""


class Flags(IntFlag):
    """Netlink message header flags."""

    REQUEST = 0x1
    MULTI = 0x2
    ACK = 0x4
    ECHO = 0x8
    DUMP_INTR = 0x10
    ROOT = 0x100
    MATCH = 0x200
    ATOMIC = 0x400
    DUMP = ROOT | MATCH


@dataclass
class Header:
    """A generic netlink message header."""

    command: int
    version: int = 0


@dataclass
class Message:
    """A generic netlink message: header plus packed attributes."""

    header: Header
    data: bytes = b""


@dataclass
class Config:
    """Options for dial().

    groups is the multicast group bitmask bound on the socket. strict enables
    kernel side strict attribute checking. timeout is applied to every
    receive; None blocks.
    """

    groups: int = 0
    strict: bool = False
    timeout: float | None = None


class Transport(Protocol):
    """The message exchange used by generated Conn types."""

    def execute(self, message: Message, family: int, flags: int) -> list[Message]: ...

    def close(self) -> None: ...


# Maps a family name to the channel (netlink message type) used to reach it.
ChannelResolver = Callable[[Transport, str], int]


class Conn:
    """A generic netlink connection over a NETLINK_GENERIC socket.

    Example:
        with dial() as c:
            msgs = c.execute(msg, uapi.GENL_ID_CTRL, Flags.REQUEST | Flags.DUMP)
    """

    def __init__(self, sock: socket.socket, *, bufsize: int = _DEFAULT_BUFSIZE) -> None:
        self._sock = sock
        self._bufsize = bufsize
        self._seq = 0

    def __enter__(self) -> "Conn":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._sock.close()

    def execute(self, message: Message, family: int, flags: int) -> list[Message]:
        """Send a request and collect every reply message for it.

        Single replies end after the first message without the MULTI flag;
        dumps end at NLMSG_DONE. An NLMSG_ERROR carrying a non-zero code
        raises NetlinkError, and a zero code (an acknowledgement) ends the
        exchange.
        """
        self._seq += 1
        seq = self._seq

        self._sock.send(_pack(message, family, int(flags), seq))

        replies: list[Message] = []
        while True:
            data = self._sock.recv(self._bufsize)
            if not data:
                raise ProtocolError("netlink socket closed while awaiting reply")

            for typ, msg_flags, msg_seq, body in _split(data):
                if msg_seq != seq or typ == uapi.NLMSG_NOOP:
                    continue

                if typ == uapi.NLMSG_ERROR:
                    _check_error(body)
                    return replies

                if typ == uapi.NLMSG_DONE:
                    if len(body) >= _ERROR_CODE.size:
                        _check_error(body)
                    return replies

                replies.append(_unpack(body))
                if not msg_flags & Flags.MULTI:
                    return replies


def dial(config: Config | None = None) -> Conn:
    """Open a generic netlink socket and wrap it in a Conn."""
    if config is None:
        config = Config()

    sock = socket.socket(socket.AF_NETLINK, socket.SOCK_RAW, uapi.NETLINK_GENERIC)
    try:
        sock.bind((0, config.groups))
        if config.strict:
            sock.setsockopt(uapi.SOL_NETLINK, uapi.NETLINK_GET_STRICT_CHK, 1)
        if config.timeout is not None:
            sock.settimeout(config.timeout)
    except OSError:
        sock.close()
        raise

    return Conn(sock)


def control_channel(c: Transport, family: str) -> int:
    """Route every family through the fixed generic netlink control channel."""
    return uapi.GENL_ID_CTRL


def resolve_family(c: Transport, family: str) -> int:
    """Look up a family's dynamic channel through the control family."""
    ae = AttributeEncoder()
    ae.string(uapi.CTRL_ATTR_FAMILY_NAME, family)

    msg = Message(header=Header(command=uapi.CTRL_CMD_GETFAMILY, version=1), data=ae.encode())
    for m in c.execute(msg, uapi.GENL_ID_CTRL, Flags.REQUEST):
        for attr in AttributeDecoder(m.data):
            if attr.type == uapi.CTRL_ATTR_FAMILY_ID:
                return attr.uint16()

    raise NetlinkError(errno.ENOENT, f"{family}: generic netlink family not found")


def _pack(message: Message, family: int, flags: int, seq: int) -> bytes:
    body = _GENL_HEADER.pack(message.header.command, message.header.version, 0) + message.data
    return _NLMSG_HEADER.pack(_NLMSG_HEADER.size + len(body), family, flags, seq, 0) + body


def _unpack(body: bytes) -> Message:
    if len(body) < _GENL_HEADER.size:
        raise ProtocolError(f"generic netlink message too short: {len(body)} bytes")

    command, version, _ = _GENL_HEADER.unpack_from(body)
    return Message(header=Header(command=command, version=version), data=body[_GENL_HEADER.size :])


def _split(data: bytes) -> Iterator[tuple[int, int, int, bytes]]:
    """Yield (type, flags, seq, body) for each netlink message in data."""
    offset = 0
    while offset + _NLMSG_HEADER.size <= len(data):
        length, typ, flags, seq, _ = _NLMSG_HEADER.unpack_from(data, offset)
        if length < _NLMSG_HEADER.size or offset + length > len(data):
            raise ProtocolError(f"invalid netlink message length {length} at offset {offset}")

        yield typ, flags, seq, data[offset + _NLMSG_HEADER.size : offset + length]
        offset += (length + 3) & ~3


def _check_error(body: bytes) -> None:
    if len(body) < _ERROR_CODE.size:
        raise ProtocolError("netlink error message too short")

    (code,) = _ERROR_CODE.unpack_from(body)
    if code != 0:
        raise NetlinkError(-code, os.strerror(-code))
