"""
Code Macro Module

Expands ``// !code <path>`` directives in function sources. The referenced
file is looked up inside the design document first, then at the design docs
root (a global macro), and its text is spliced in between two marker
comments. Expansion is a single pass: included text is not scanned again.
A directive ends at a ``\n`` or ``\r\n`` line ending, which is left in place.
"""

import re
from typing import Callable, Optional

from ddoc_sync.constants import MACRO_BEGIN_MARKER, MACRO_END_MARKER
from ddoc_sync.errors import MacroFileNotFoundError
from ddoc_sync.logger import logger

CODE_MACRO_PATTERN = re.compile(r"(//[ \t]*!code[ \t]+([\w./-]+)[ \t]*)(?=\r?$)", re.MULTILINE)


def process_code_macros(doc_name: str, source_name: str, body: str,
                        read_text: Callable[[str], Optional[str]]) -> str:
    """Replace every code macro directive in ``body``.

    Args:
        doc_name: design document the source belongs to
        source_name: resource path of the source, used in error messages
        body: source text
        read_text: reads a resource relative to the design docs root,
            returning None when it does not exist

    Raises:
        MacroFileNotFoundError: a referenced file exists neither in the
            document nor at the root
    """
    if not CODE_MACRO_PATTERN.search(body):
        return body

    def _expand(match) -> str:
        directive, path = match.group(1), match.group(2)
        logger.debug(f"Replacing macro {match.start()}:{match.end()} {path} in {source_name}")

        macro = read_text(f"{doc_name}/{path}")
        if macro is None:
            macro = read_text(path)
        if macro is None:
            raise MacroFileNotFoundError(path, source_name, directive)

        # the directive's own line ending stays after the end marker
        return "\n".join([
            MACRO_BEGIN_MARKER.format(path=path),
            macro,
            MACRO_END_MARKER.format(path=path),
            "",
        ])

    expanded = CODE_MACRO_PATTERN.sub(_expand, body)
    logger.debug(f"{source_name} after // !code substitutions:\n{expanded}")
    return expanded
