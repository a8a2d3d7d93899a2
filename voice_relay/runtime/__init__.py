"""Runtime package.

Keep this module dependency-light: importing `voice_relay.runtime.*` from unit
tests should not open any network connection.
"""

__all__: list[str] = []
