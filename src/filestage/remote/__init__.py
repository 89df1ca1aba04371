from .keys import derive_remote_key
from .transporter import RemoteTransporter

__all__ = ["derive_remote_key", "RemoteTransporter"]
