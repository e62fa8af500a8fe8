# markdown_stripper.py
# Description: Best-effort removal of Markdown formatting from backend replies before display
#
# Imports
import re
#
#######################################################################################################################
#
# Functions:

_CODE_FENCE_RE = re.compile(r"```[\s\S]*?```")
# Keeps a leading blockquote marker so the blockquote pass below still sees it
_HEADING_RE = re.compile(r"^([ \t]*(?:>[ \t]*)*)(?:#{1,6}[ \t]+)+", re.MULTILINE)
_BOLD_RE = re.compile(r"(\*\*|__)(?=\S)(.+?)(?<=\S)\1")
_ITALIC_STAR_RE = re.compile(r"\*(?=[^\s*])(.+?)(?<=[^\s*])\*")
_ITALIC_UNDERSCORE_RE = re.compile(r"(?<!\w)_(?=[^\s_])(.+?)(?<=[^\s_])_(?!\w)")
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\([^)]*\)")
_LINK_RE = re.compile(r"\[([^\]]*)\]\([^)]*\)")
_BLOCKQUOTE_RE = re.compile(r"^[ \t]*(?:>[ \t]?)+", re.MULTILINE)


def strip_markdown(text: str) -> str:
    """
    Remove common Markdown markup from ``text``.

    Passes run in a fixed order: fenced code blocks, heading markers, bold and
    italic emphasis, images and links, then blockquote markers. This is not a
    Markdown parser; nested or malformed markup may leave residue behind.
    """
    if not text:
        return ""
    text = _CODE_FENCE_RE.sub("", text)
    text = _HEADING_RE.sub(r"\1", text)
    text = _BOLD_RE.sub(r"\2", text)
    text = _ITALIC_STAR_RE.sub(r"\1", text)
    text = _ITALIC_UNDERSCORE_RE.sub(r"\1", text)
    text = _IMAGE_RE.sub(r"\1", text)
    text = _LINK_RE.sub(r"\1", text)
    text = _BLOCKQUOTE_RE.sub("", text)
    return text.strip()

#
# End of markdown_stripper.py
#######################################################################################################################
