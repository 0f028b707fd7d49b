"""
Text helpers shared by the record parsers
"""

from typing import List


def split_lines(body: str) -> List[str]:
    """
    Split record text on '\\n' only.

    One trailing '\\r' is removed from each line and a final newline does
    not produce an empty last line. Other Unicode line breaks (form feed,
    NEL, U+2028) stay inside the line they appear in.
    """
    lines = body.split('\n')
    if lines[-1] == '':
        lines.pop()
    return [line[:-1] if line.endswith('\r') else line for line in lines]
