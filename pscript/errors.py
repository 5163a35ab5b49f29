from __future__ import annotations


class PSError(Exception):
    """ Base class for all pscript errors.

    Every error carries a PostScript-style `tag` and, where known, the `name`
    of the operator or identifier that failed. ``str(err)`` renders as
    ``/tag in name``.
    """
    tag = "error"

    def __init__(self, name: str | None = None, detail: str | None = None):
        self.name = name
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        text = f"/{self.tag}"
        if self.name:
            text += f" in {self.name}"
        if self.detail:
            text += f": {self.detail}"
        return text

    def __str__(self) -> str:
        return self.message


class PSStackUnderflow(PSError):
    """ Raised when the operand (or dictionary) stack is too shallow"""
    tag = "stackunderflow"


class PSUndefined(PSError):
    """ Raised when a name is neither bound nor a builtin, and for bad radix literals"""
    tag = "undefined"


class PSTypeCheck(PSError):
    """ Raised when a value coercion meets the wrong variant"""
    tag = "typecheck"

    def __init__(self, expected: str, actual: str, name: str | None = None):
        self.expected = expected
        self.actual = actual
        super().__init__(name, f"expected {expected}, got {actual}")


class PSUnmatchedMark(PSError):
    """ Raised when ']' finds no mark on the operand stack"""
    tag = "unmatchedmark"


class PSSyntaxError(PSError):
    """ Raised on a '}' with no open block, or an unterminated block"""
    tag = "syntaxerror"


class PSInvalidNumber(PSError):
    """ Raised when a numeric literal is neither an int32 nor a float32"""
    tag = "invalidnumber"
