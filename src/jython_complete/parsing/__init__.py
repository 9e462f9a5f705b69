"""Script parsing and scope/type inference for Jython sources."""

from jython_complete.parsing.parser import ScriptParser, safe_decode_text, statements_of

__all__ = ["ScriptParser", "safe_decode_text", "statements_of"]
