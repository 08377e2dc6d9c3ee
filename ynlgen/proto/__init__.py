"""Runtime support imported by generated netlink bindings."""

from .attributes import Attribute as Attribute
from .attributes import AttributeDecoder as AttributeDecoder
from .attributes import AttributeEncoder as AttributeEncoder
from .attributes import DecodeError as DecodeError
from .attributes import EncodeError as EncodeError
from .genetlink import Config as Config
from .genetlink import Conn as Conn
from .genetlink import Flags as Flags
from .genetlink import Header as Header
from .genetlink import Message as Message
from .genetlink import NetlinkError as NetlinkError
from .genetlink import ProtocolError as ProtocolError
from .genetlink import ReplyError as ReplyError
from .genetlink import control_channel as control_channel
from .genetlink import dial as dial
from .genetlink import resolve_family as resolve_family
