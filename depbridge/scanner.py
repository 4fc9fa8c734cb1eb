"""Lexical import/export scanner.

The scanner works line by line over the text of a single file. Comments are
blanked first (block comments may span lines), each line is split on ``;``
outside string literals, multi-line ``import { ... }``, ``export { ... }``
and ``export * from`` statements are joined back into one logical statement,
and each statement is then matched against a small set of patterns.

All patterns are compiled once at import time but carry no match position of
their own: every call builds fresh ``re.finditer`` iterators, so scanning one
file can never leak state into the next.
"""

import logging
import re
from typing import Iterator, List, Optional, Tuple, Union

from .errors import AnalysisIssue, IssueKind
from .models import ImportKind, ImportRecord, Language, SourceUnit

logger = logging.getLogger(__name__)

ES_LANGUAGES = frozenset([Language.TYPESCRIPT, Language.JAVASCRIPT])
MARKUP_LANGUAGES = frozenset([Language.VUE, Language.SVELTE, Language.ASTRO])
STYLE_LANGUAGES = frozenset([Language.CSS])

# Longest run of lines joined into a single statement.
MAX_STATEMENT_LINES = 64

# import X from 'p' | import { a } from 'p' | import X, { a } from 'p' | import * as N from 'p'
IMPORT_FROM = re.compile(
    r'^import\s+(?P<type>type\s+)?(?P<clause>[\w$*{][^;]*?)\s*\bfrom\s*(?P<q>[\'"])(?P<spec>[^\'"]*)(?P=q)'
)
# import 'p'
SIDE_EFFECT_IMPORT = re.compile(r'^import\s*(?P<q>[\'"])(?P<spec>[^\'"]*)(?P=q)')
# export { a, b as c } from 'p'
EXPORT_NAMED_FROM = re.compile(
    r'^export\s+(?P<type>type\s+)?\{(?P<names>[^}]*)\}\s*from\s*(?P<q>[\'"])(?P<spec>[^\'"]*)(?P=q)'
)
# export * from 'p' | export * as N from 'p'
EXPORT_STAR_FROM = re.compile(
    r'^export\s+\*\s*(?:as\s+(?P<alias>[\w$]+)\s+)?from\s*(?P<q>[\'"])(?P<spec>[^\'"]*)(?P=q)'
)
# import('p')
DYNAMIC_IMPORT = re.compile(r'(?<![\w$.])import\s*\(\s*(?P<q>[\'"`])(?P<spec>[^\'"`]*)(?P=q)\s*\)')
# require('p')
REQUIRE_CALL = re.compile(r'(?<![\w$.])require\s*\(\s*(?P<q>[\'"])(?P<spec>[^\'"]*)(?P=q)\s*\)')
# const X = require('p') | const { a, b } = require('p')
REQUIRE_BINDING = re.compile(
    r'(?:const|let|var)\s+(?P<bind>[\w$]+|\{[^}]*\})\s*=\s*(?=require\s*\()'
)
# @import 'p' | @import url('p') | @import url( p )
CSS_IMPORT = re.compile(
    r'@import\s+(?:url\(\s*(?:(?P<uq>[\'"])(?P<uspec>[^\'"]*)(?P=uq)|(?P<bare>[^\'")\s]+))'
    r'|(?P<q>[\'"])(?P<spec>[^\'"]*)(?P=q))'
)

# export (default)? (async)? (function|class|const|let|var|interface|type|enum) NAME
EXPORT_DECLARATION = re.compile(
    r'^export\s+(?P<default>default\s+)?(?:declare\s+)?(?:abstract\s+)?(?:async\s+)?'
    r'(?:const\s+enum|function\s*\*?|class|const|let|var|interface|type|enum)\s+(?!extends\b)(?P<name>[\w$]+)'
)
EXPORT_LIST = re.compile(r'^export\s+(?:type\s+)?\{(?P<names>[^}]*)\}')
EXPORT_DEFAULT = re.compile(r'^export\s+default\b')

STATEMENT_START = re.compile(r'^(?:import(?=[\s{*\'"])|export\s+(?:type\s+)?\{|export\s+\*)')
EXPORT_STAR_START = re.compile(r'^export\s+\*')
DANGLING_FROM = re.compile(r'\bfrom$')
# Unquoted CSS url(https://...) right before "//"
URL_SCHEME = re.compile(r'url\(\s*[A-Za-z][\w+.-]*:$')
AS_SPLIT = re.compile(r'\s+as\s+')


def scan(
    content: str,
    language: Union[Language, str],
    path: str = "",
    issues: Optional[List[AnalysisIssue]] = None,
) -> Tuple[List[ImportRecord], List[str]]:
    """Extract import records and exported symbol names from one file.

    Args:
        content: Raw text of the file.
        language: Language tag of the file.
        path: Corpus path stored on every record.
        issues: Optional list that receives malformed-specifier diagnostics.

    Returns:
        ``(imports, exported_symbols)``. Both are empty for languages the
        scanner does not understand.
    """
    language = _coerce_language(language)
    if language in ES_LANGUAGES:
        statements = list(_iter_statements(content))
        return _scan_es_imports(statements, path, issues), _scan_es_exports(statements)
    if language in MARKUP_LANGUAGES:
        return _scan_es_imports(list(_iter_statements(content)), path, issues), []
    if language in STYLE_LANGUAGES:
        return _scan_css_imports(content, path, issues), []
    return [], []


def scan_unit(unit: SourceUnit, issues: Optional[List[AnalysisIssue]] = None) -> Tuple[List[ImportRecord], List[str]]:
    return scan(unit.content, unit.language, path=unit.path, issues=issues)


def split_named_list(names: str) -> List[str]:
    """Split the inside of ``{ ... }`` into bound names.

    ``a as b`` keeps ``b``; a leading ``type`` marker is preserved on the
    bound name.
    """
    result = []
    for entry in _split_top_level(names):
        entry = entry.strip()
        if not entry:
            continue
        parts = AS_SPLIT.split(entry)
        bound = parts[-1].strip()
        if len(parts) > 1 and parts[0].strip().startswith("type ") and not bound.startswith("type "):
            bound = "type " + bound
        if bound:
            result.append(bound)
    return result


def _coerce_language(language: Union[Language, str]) -> Language:
    if isinstance(language, Language):
        return language
    try:
        return Language(language)
    except ValueError:
        return Language.UNKNOWN


def _split_top_level(text: str) -> List[str]:
    """Split on commas that are not nested inside brackets."""
    parts = []
    depth = 0
    current = ""
    for char in text:
        if char in "{[(<":
            depth += 1
        elif char in "}])>":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append(current)
            current = ""
            continue
        current += char
    parts.append(current)
    return parts


def _code_lines(content: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(line_number, text)`` with comments removed.

    Block comments are tracked across lines. Lines that begin inside a
    multi-line template literal contribute nothing until it closes.
    """
    in_block = False
    in_template = False

    for index, line in enumerate(content.split("\n")):
        out = []
        quote = None
        template_opened_here = False
        i = 0
        n = len(line)

        while i < n:
            char = line[i]

            if in_block:
                if line.startswith("*/", i):
                    in_block = False
                    i += 2
                else:
                    i += 1
                continue

            if in_template:
                if char == "\\":
                    if template_opened_here:
                        out.append(line[i:i + 2])
                    i += 2
                    continue
                if char == "`":
                    in_template = False
                if template_opened_here:
                    out.append(char)
                i += 1
                continue

            if quote:
                out.append(char)
                if char == "\\" and i + 1 < n:
                    out.append(line[i + 1])
                    i += 2
                    continue
                if char == quote:
                    quote = None
                i += 1
                continue

            if line.startswith("/*", i):
                in_block = True
                i += 2
                continue
            # "//" inside an unquoted url(...) is not a comment.
            if line.startswith("//", i) and not URL_SCHEME.search(line, 0, i):
                break

            if char in "'\"":
                quote = char
            elif char == "`":
                in_template = True
                template_opened_here = True
            out.append(char)
            i += 1

        yield index + 1, "".join(out)


def _iter_statements(content: str) -> Iterator[Tuple[int, str]]:
    """Yield logical statements with the line number they start on."""
    buffer = ""
    start_line = 0
    buffered_lines = 0

    for line_number, raw in _code_lines(content):
        for line in _split_statements(raw):
            if buffer:
                buffer += " " + line
                buffered_lines += 1
                if not _is_incomplete(buffer) or buffered_lines >= MAX_STATEMENT_LINES:
                    yield start_line, buffer
                    buffer = ""
                continue

            if STATEMENT_START.match(line) and _is_incomplete(line):
                buffer = line
                start_line = line_number
                buffered_lines = 1
                continue

            yield line_number, line

    if buffer:
        yield start_line, buffer


def _split_statements(line: str) -> List[str]:
    """Split a code line on semicolons outside string and template literals."""
    parts = []
    current: List[str] = []
    quote = None
    i = 0
    n = len(line)

    while i < n:
        char = line[i]
        if quote:
            current.append(char)
            if char == "\\" and i + 1 < n:
                current.append(line[i + 1])
                i += 2
                continue
            if char == quote:
                quote = None
        elif char == ";":
            parts.append("".join(current))
            current = []
        else:
            if char in "'\"`":
                quote = char
            current.append(char)
        i += 1

    parts.append("".join(current))
    return [part.strip() for part in parts if part.strip()]


def _is_incomplete(statement: str) -> bool:
    if statement.count("{") > statement.count("}"):
        return True
    # import X
    #   from 'p'
    if statement.startswith("import") and not any(q in statement for q in "'\"`("):
        return True
    # export * from
    #   'p'
    if statement.startswith("export") and not any(q in statement for q in "'\""):
        return bool(EXPORT_STAR_START.match(statement) or DANGLING_FROM.search(statement))
    return False


def _make_record(spec: str, kind: ImportKind, names, line: int, path: str,
                 issues: Optional[List[AnalysisIssue]]) -> Optional[ImportRecord]:
    if not spec.strip():
        logger.debug("Discarding empty specifier at %s:%d", path, line)
        if issues is not None:
            issues.append(AnalysisIssue(IssueKind.MALFORMED_SPECIFIER, path, "empty module specifier", line))
        return None
    return ImportRecord(
        raw_specifier=spec.strip(),
        kind_hint=kind,
        symbol_names=tuple(names),
        line_number=line,
        source_unit_path=path,
    )


def _parse_import_clause(clause: str) -> Tuple[ImportKind, List[str]]:
    """Work out the binding kind and bound names of an import clause."""
    clause = clause.strip()
    names: List[str] = []
    has_default = False
    has_namespace = False
    rest = clause

    if not clause.startswith(("{", "*")):
        default_match = re.match(r'^(?P<name>[\w$]+)\s*(?:,\s*(?P<rest>.*))?$', clause, re.DOTALL)
        if default_match:
            names.append(default_match.group("name"))
            has_default = True
            rest = (default_match.group("rest") or "").strip()

    if rest.startswith("*"):
        namespace_match = re.match(r'^\*\s*as\s+(?P<name>[\w$]+)', rest)
        if namespace_match:
            names.append(namespace_match.group("name"))
            has_namespace = True
    elif rest.startswith("{"):
        close = rest.rfind("}")
        inner = rest[1:close] if close > 0 else rest[1:]
        names.extend(split_named_list(inner))

    if has_default:
        return ImportKind.DEFAULT, names
    if has_namespace:
        return ImportKind.NAMESPACE, names
    return ImportKind.NAMED, names


def _require_bindings(statement: str) -> List[Tuple[int, List[str]]]:
    """Return ``(require_start, bound_names)`` for assigned require calls."""
    bindings = []
    for match in REQUIRE_BINDING.finditer(statement):
        bind = match.group("bind")
        if bind.startswith("{"):
            names = []
            for entry in _split_top_level(bind[1:-1]):
                entry = entry.split("=")[0]
                bound = entry.split(":")[-1].strip()
                if bound and not bound.startswith("..."):
                    names.append(bound)
        else:
            names = [bind]
        bindings.append((match.end(), names))
    return bindings


def _scan_es_imports(statements: List[Tuple[int, str]], path: str,
                     issues: Optional[List[AnalysisIssue]]) -> List[ImportRecord]:
    records: List[ImportRecord] = []

    for line_number, statement in statements:
        found: List[Optional[ImportRecord]] = []

        if statement.startswith("import"):
            match = IMPORT_FROM.match(statement)
            if match:
                kind, names = _parse_import_clause(match.group("clause"))
                if match.group("type"):
                    names = [n if n.startswith("type ") else "type " + n for n in names]
                found.append(_make_record(match.group("spec"), kind, names, line_number, path, issues))
            else:
                match = SIDE_EFFECT_IMPORT.match(statement)
                if match:
                    found.append(_make_record(match.group("spec"), ImportKind.SIDE_EFFECT, [], line_number, path, issues))

        elif statement.startswith("export"):
            match = EXPORT_NAMED_FROM.match(statement)
            if match:
                names = split_named_list(match.group("names"))
                if match.group("type"):
                    names = [n if n.startswith("type ") else "type " + n for n in names]
                found.append(_make_record(match.group("spec"), ImportKind.NAMED, names, line_number, path, issues))
            else:
                match = EXPORT_STAR_FROM.match(statement)
                if match:
                    names = [match.group("alias")] if match.group("alias") else []
                    found.append(_make_record(match.group("spec"), ImportKind.NAMESPACE, names, line_number, path, issues))

        for match in DYNAMIC_IMPORT.finditer(statement):
            found.append(_make_record(match.group("spec"), ImportKind.DYNAMIC, [], line_number, path, issues))

        if "require" in statement:
            bindings = _require_bindings(statement)
            for match in REQUIRE_CALL.finditer(statement):
                names = next((bound for start, bound in bindings if start == match.start()), [])
                found.append(_make_record(match.group("spec"), ImportKind.REQUIRE_CALL, names, line_number, path, issues))

        records.extend(record for record in found if record is not None)

    return records


def _scan_es_exports(statements: List[Tuple[int, str]]) -> List[str]:
    exports: List[str] = []
    seen = set()

    def add(name: str):
        if name and name not in seen:
            seen.add(name)
            exports.append(name)

    for _, statement in statements:
        if not statement.startswith("export"):
            continue

        declaration = EXPORT_DECLARATION.match(statement)
        if declaration:
            add(declaration.group("name"))
            continue

        export_list = EXPORT_LIST.match(statement)
        if export_list:
            for name in split_named_list(export_list.group("names")):
                add(name[5:].strip() if name.startswith("type ") else name)
            continue

        star = EXPORT_STAR_FROM.match(statement)
        if star and star.group("alias"):
            add(star.group("alias"))
            continue

        if EXPORT_DEFAULT.match(statement):
            add("default")

    return exports


def _scan_css_imports(content: str, path: str, issues: Optional[List[AnalysisIssue]]) -> List[ImportRecord]:
    records = []
    for line_number, line in _code_lines(content):
        if "@import" not in line:
            continue
        for match in CSS_IMPORT.finditer(line):
            if match.group("q"):
                spec = match.group("spec")
            elif match.group("uq"):
                spec = match.group("uspec")
            else:
                spec = match.group("bare")
            record = _make_record(spec or "", ImportKind.SIDE_EFFECT, [], line_number, path, issues)
            if record is not None:
                records.append(record)
    return records
