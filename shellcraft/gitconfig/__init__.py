"""Git config files: section/entry model and canonical codec."""

from .model import GitConfig, GitConfigSection, GitConfigEntry
from .codec import (
    parse_git_config, serialize_git_config, read_git_config, write_git_config,
    decode_value, encode_value,
)

__all__ = [
    "GitConfig", "GitConfigSection", "GitConfigEntry",
    "parse_git_config", "serialize_git_config", "read_git_config", "write_git_config",
    "decode_value", "encode_value",
]
