"""JSDoc comment parsing."""

from __future__ import annotations

import re

from .models import DocEntry

_TAG_RE = re.compile(r"^@([A-Za-z][\w-]*)\s*(.*)$", re.DOTALL)
_INLINE_TAG_RE = re.compile(r"(?<=\s)(?=@(?:param|returns?|example)\b)")
_PARAM_NAME_RE = re.compile(r"^(\[[^\]]*\]|[\w$.]+)\s*(.*)$", re.DOTALL)
_BULLET_RE = re.compile(r"^[-–—*•]\s*")


def clean_doc_text(text: str) -> str:
    """Trim, drop one leading bullet or dash, and collapse whitespace."""
    text = _BULLET_RE.sub("", text.strip(), count=1)
    return re.sub(r"\s+", " ", text).strip()


def strip_comment_delimiters(comment: str) -> str:
    """Remove ``/** */`` delimiters, ``*`` gutters and ``//`` markers."""
    text = comment.strip()
    if text.startswith("/*"):
        text = text[2:].lstrip("*")
        if text.endswith("*/"):
            text = text[:-2].rstrip("*")
    lines = []
    for line in text.split("\n"):
        line = line.strip()
        if line.startswith("//"):
            line = line.lstrip("/")
        elif line.startswith("*"):
            line = line[1:]
        lines.append(line.strip())
    return "\n".join(lines).strip()


def _split_type_expression(content: str) -> tuple[str | None, str]:
    """Split a leading ``{type}`` off tag content, respecting nested braces."""
    content = content.strip()
    if not content.startswith("{"):
        return None, content
    depth = 0
    for i, ch in enumerate(content):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return content[1:i].strip(), content[i + 1 :].strip()
    return None, content


def _param_name(token: str) -> str:
    """``[type=any]`` -> ``type``; ``height`` -> ``height``."""
    if token.startswith("["):
        token = token[1:-1].split("=", 1)[0]
    return token.strip()


def _append(existing: str | None, line: str) -> str:
    if not line:
        return existing or ""
    return f"{existing} {line}" if existing else line


def parse_doc_comment(comment: str | None) -> DocEntry:
    """Parse a JSDoc comment into a DocEntry.

    Lines that start with a tag move the section cursor; other lines append
    to the current section. Recognized tags are ``@param``, ``@returns`` (or
    ``@return``) and ``@example``; any other tag is kept in ``tags``. When
    the comment has no free-text description, the whole delimiter-stripped
    text is used as the description instead.
    """
    if not comment:
        return DocEntry()

    raw = strip_comment_delimiters(comment)
    if not raw:
        return DocEntry()

    description = ""
    params: dict[str, str] = {}
    returns: str | None = None
    example: str | None = None
    tags: dict[str, str] = {}

    section = "description"
    current_param: str | None = None

    for raw_line in raw.split("\n"):
        # Known tags written inline ("Gets info. @param x - ...") get their own line
        for line in _INLINE_TAG_RE.split(raw_line):
            line = line.strip()
            if not line:
                continue

            tag_match = _TAG_RE.match(line)
            if tag_match:
                tag, content = tag_match.group(1), tag_match.group(2)
                if tag == "param":
                    section = "param"
                    current_param = None
                    _, rest = _split_type_expression(content)
                    name_match = _PARAM_NAME_RE.match(rest)
                    if name_match:
                        current_param = _param_name(name_match.group(1))
                        params[current_param] = clean_doc_text(name_match.group(2))
                elif tag in ("returns", "return"):
                    section = "returns"
                    _, rest = _split_type_expression(content)
                    returns = clean_doc_text(rest)
                elif tag == "example":
                    section = "example"
                    example = clean_doc_text(content)
                else:
                    section = tag
                    tags[tag] = clean_doc_text(content)
                continue

            cleaned = clean_doc_text(line)
            if section == "description":
                description = _append(description, cleaned)
            elif section == "param":
                if current_param:
                    params[current_param] = _append(params[current_param], cleaned)
            elif section == "returns":
                returns = _append(returns, cleaned)
            elif section == "example":
                example = _append(example, cleaned)
            else:
                tags[section] = _append(tags[section], cleaned)

    if not description:
        description = re.sub(r"\s+", " ", raw).strip()

    return DocEntry(
        description=description,
        params=params,
        returns=returns,
        example=example,
        tags=tags,
    )
