"""plugcli - the command-dispatch core of a pluggable command-line framework.

Resolves argv against a lazily loaded tree of namespaces and commands,
normalizes options, fires plugin hooks around command execution and provides
a paginator over paged HTTP APIs. Plugins are plain Python modules listed in
the configuration file; everything runs on asyncio.
"""
