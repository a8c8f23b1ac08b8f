"""Core services shared by the packer, unpacker and CLI."""
