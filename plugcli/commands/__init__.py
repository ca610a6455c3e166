"""Command handling for plugcli.

This package provides:
- models: Data structures (CommandOption, CommandInput, CommandMetadata)
- maps: Lazy loader cells and the alias-resolving command map
- namespace: The namespace tree and argv resolution
- parsing: Argv parsing and option normalization
- validators: Input validators
- command: The Command base class
- runner: The command execution lifecycle
- help: Help text for namespaces and commands
"""
