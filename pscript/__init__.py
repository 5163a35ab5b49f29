# Core type aliases for pscript's runtime.
# Runtime values are instances of the closed Value hierarchy in
# pscript.types.values; operand and dictionary stacks only ever hold those.
#
# Naming guidance:
# - OperatorFn: the body of a builtin; receives the session State and mutates it.

import logging
from typing import Any, Callable

# Builtin operator body: fn(state) -> None
OperatorFn = Callable[[Any], None]

logging.getLogger(__name__).addHandler(logging.NullHandler())
