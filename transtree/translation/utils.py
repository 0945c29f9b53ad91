"""
Translation utility functions for chunking documents and extracting AI output.
"""

from typing import List

DOCUMENT_OPEN = "<document>"
DOCUMENT_CLOSE = "</document>"
OUTPUT_OPEN = "<output>"
OUTPUT_CLOSE = "</output>"


def divide_into_chunks(text: str, lines_per_chunk: int) -> List[str]:
    """
    Split text into chunks of at most lines_per_chunk lines.

    Only "\\n" ends a line. Line endings stay attached to their lines, so
    joining the chunks gives back the original text.

    Args:
        text: Text to split
        lines_per_chunk: Maximum lines per chunk; 0 or less disables splitting

    Returns:
        List of chunks (a single chunk for single-line text)

    Example:
        >>> divide_into_chunks("a\\nb\\nc", 2)
        ['a\\nb\\n', 'c']
    """
    if "\n" not in text or lines_per_chunk <= 0:
        return [text]

    pieces = text.split("\n")
    lines = [piece + "\n" for piece in pieces[:-1]]
    if pieces[-1]:
        lines.append(pieces[-1])
    return [
        "".join(lines[i:i + lines_per_chunk])
        for i in range(0, len(lines), lines_per_chunk)
    ]


def wrap_document(prompt: str, chunk: str) -> str:
    """Append a chunk to the prompt, enclosed in document delimiters."""
    return f"{prompt}{DOCUMENT_OPEN}{chunk}\n{DOCUMENT_CLOSE}"


def extract_translated_from_response(message: str) -> str:
    """
    Extract the text enclosed in output delimiters.

    Every <output> section is collected; one newline right after the opening
    tag is dropped and a section ends at the next </output> (or at the end of
    the message when unclosed). A message without any <output> yields "".

    Example:
        >>> extract_translated_from_response("Sure!<output>\\nBonjour</output>")
        'Bonjour'
    """
    if OUTPUT_OPEN not in message:
        return ""

    sections = message.split(OUTPUT_OPEN)[1:]
    result = []
    for section in sections:
        if section.startswith("\n"):
            section = section[1:]
        result.append(section.split(OUTPUT_CLOSE, 1)[0])
    return "".join(result)
