"""
Class page parser for Javadoc HTML.

Extracts the full documentation of one type from its HTML page: kind,
description, inheritance, deprecation, "See Also" references, methods and
fields. Targets the HTML5 layout produced by the JDK 11+ javadoc tool:

    <div class="type-signature">...</div>
    <section class="class-description">
        <dl class="notes">...</dl>
        <div class="block">...</div>
    </section>
    <section class="method-details">
        <section class="detail"><h3>name</h3><div class="member-signature">...</div>...</section>
    </section>
    <section class="field-details">...</section>

Every missing section yields an empty or default value. Parsing is a pure
function of its inputs, so the same page always produces the same record.
"""

import logging
import re
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from javadoc_mcp.parsers.html_to_markdown import HTML_PARSER, html_to_markdown
from javadoc_mcp.schemas import (
    ClassDocumentation,
    EntityKind,
    FieldDoc,
    MethodDoc,
    ParameterDoc,
)

logger = logging.getLogger(__name__)

MODIFIER_KEYWORDS = ("public", "private", "protected", "static", "final", "abstract", "default")
DEFAULT_FIELD_TYPE = "Object"

SUPERINTERFACES_LABEL = "All Superinterfaces:"
IMPLEMENTING_CLASSES_LABEL = "All Known Implementing Classes:"
SEE_ALSO_LABEL = "See Also:"

_EXCEPTION_NAME = re.compile(r"\w*(?:Exception|Error|Throwable)\b")
_GENERICS = re.compile(r"<[^<>]*>")
_ANNOTATION = re.compile(r'@[\w.]+(?:\s*\((?:[^()"]|"[^"]*")*\))?\s*')


def normalize_text(text: str) -> str:
    """Collapse whitespace, non-breaking spaces included."""
    return re.sub(r"\s+", " ", text.replace("\xa0", " ")).strip()


def simple_type_name(name: str) -> str:
    """Last dotted segment of a type name, generics removed."""
    name = strip_generics(name).strip()
    return name.rsplit(".", 1)[-1]


def strip_generics(text: str) -> str:
    previous = None
    while previous != text:
        previous = text
        text = _GENERICS.sub("", text)
    return text


def split_top_level(text: str, separator: str = ",") -> List[str]:
    """Split on `separator` outside of angle brackets and parentheses."""
    parts = []
    depth = 0
    current = []
    for char in text:
        if char in "<(":
            depth += 1
        elif char in ">)":
            depth = max(depth - 1, 0)
        if char == separator and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


def extract_modifiers(signature: str) -> List[str]:
    """Modifier keywords present in a member signature, in canonical order."""
    return [keyword for keyword in MODIFIER_KEYWORDS if re.search(rf"\b{keyword}\b", signature)]


def parse_parameters(signature: str, name: Optional[str] = None) -> List[ParameterDoc]:
    """
    Parse the parameter list of a method signature.

    Annotations are dropped first so their arguments are never read as
    parameters. When `name` is given, the list is the one following it.
    Each comma-separated part is split on its last whitespace into type and
    name; a part without whitespace is a bare type.
    """
    signature = _ANNOTATION.sub("", signature)

    start = -1
    if name:
        match = re.search(rf"(?<![\w$]){re.escape(name)}\s*\(", signature)
        if match:
            start = match.end() - 1
    if start == -1:
        start = signature.find("(")
    if start == -1:
        return []

    depth = 0
    end = -1
    for position in range(start, len(signature)):
        if signature[position] == "(":
            depth += 1
        elif signature[position] == ")":
            depth -= 1
            if depth == 0:
                end = position
                break
    if end == -1:
        return []

    parameters: List[ParameterDoc] = []
    for part in split_top_level(signature[start + 1:end]):
        part = normalize_text(part)
        if not part:
            continue
        pieces = part.rsplit(" ", 1)
        if len(pieces) == 2:
            parameters.append(ParameterDoc(type=pieces[0].strip(), name=pieces[1].strip()))
        else:
            parameters.append(ParameterDoc(type=part))
    return parameters


def determine_kind(type_signature: str) -> EntityKind:
    """
    Classify a type from its declaration text.

    Examples:
        'public @interface Marker'              -> annotation
        'public interface Adaptation extends X' -> interface
        'public enum Mode'                      -> enum
        'public class NoSuchThing extends RuntimeException' -> exception
    """
    if "@interface" in type_signature:
        return EntityKind.ANNOTATION
    if re.search(r"(?<![\w@])interface\b", type_signature):
        return EntityKind.INTERFACE
    if re.search(r"\benum\b", type_signature):
        return EntityKind.ENUM
    # type name and superclass only
    declaration = re.split(r"\bimplements\b", strip_generics(_ANNOTATION.sub("", type_signature)), maxsplit=1)[0]
    if _EXCEPTION_NAME.search(declaration):
        return EntityKind.EXCEPTION
    return EntityKind.CLASS


def _merge_unique(target: List[str], names: Iterable[str]) -> None:
    for name in names:
        if name and name not in target:
            target.append(name)


class ClassDocParser:
    """
    Parse a Javadoc class page into a ClassDocumentation record.

    Example:
        >>> parser = ClassDocParser()
        >>> doc = parser.parse(
        ...     "com.onwbp.adaptation.Adaptation",
        ...     "com/onwbp/adaptation/Adaptation.html",
        ...     html,
        ... )
        >>> doc.kind, len(doc.methods)
    """

    def parse(
        self,
        fully_qualified_name: str,
        html_path: str,
        html: str,
        package_name: Optional[str] = None,
    ) -> ClassDocumentation:
        """
        Extract the documentation of one type.

        Args:
            fully_qualified_name: FQN of the documented type
            html_path: Locator of the page, stored on the record
            html: Page content
            package_name: Owning package; derived from the FQN when omitted,
                which is wrong for nested types such as `com.x.Outer.Inner`

        Returns:
            Fully populated ClassDocumentation
        """
        soup = BeautifulSoup(html, HTML_PARSER)

        if package_name is None:
            package_name = fully_qualified_name.rsplit(".", 1)[0] if "." in fully_qualified_name else ""
        if package_name and fully_qualified_name.startswith(package_name + "."):
            simple_name = fully_qualified_name[len(package_name) + 1:]
        else:
            simple_name = fully_qualified_name.rsplit(".", 1)[-1]

        type_signature = self._type_signature(soup)
        class_description = soup.select_one(".class-description")

        methods = self.extract_methods(soup, fully_qualified_name, package_name)
        fields = self.extract_fields(soup)

        logger.debug(f"Parsed {fully_qualified_name}: {len(methods)} methods, {len(fields)} fields")

        return ClassDocumentation(
            fully_qualified_name=fully_qualified_name,
            simple_name=simple_name,
            package=package_name,
            kind=determine_kind(type_signature),
            description=self.extract_description(class_description),
            extends=self.extract_extends(class_description, type_signature),
            implements=self.extract_implements(class_description, type_signature),
            methods=methods,
            fields=fields,
            deprecated=class_description is not None and class_description.select_one(".deprecation-block") is not None,
            see_also=self.extract_see_also(class_description),
            html_path=html_path,
        )

    # ------------------------------------------------------------------------
    # Type-level sections
    # ------------------------------------------------------------------------

    def _type_signature(self, soup: BeautifulSoup) -> str:
        element = soup.select_one(".type-signature")
        return normalize_text(element.get_text()) if element else ""

    def extract_description(self, class_description: Optional[Tag]) -> str:
        """Markdown of the first description block; empty when absent."""
        if class_description is None:
            return ""
        block = class_description.select_one(".block")
        return html_to_markdown(block) if block else ""

    def _notes_entries(self, class_description: Optional[Tag], label: str, exact: bool = True) -> List[Tag]:
        """<dd> elements following <dt> terms with the given label."""
        if class_description is None:
            return []

        entries = []
        for dt in class_description.select("dl.notes dt"):
            term = normalize_text(dt.get_text())
            if term == label or (not exact and term.startswith(label)):
                dd = dt.find_next_sibling("dd")
                if dd is not None:
                    entries.append(dd)
        return entries

    def extract_extends(self, class_description: Optional[Tag], type_signature: str) -> List[str]:
        """Superinterfaces from the notes, then the type signature's extends clause."""
        extends: List[str] = []

        for dd in self._notes_entries(class_description, SUPERINTERFACES_LABEL):
            for link in dd.select("code a"):
                href = link.get("href", "")
                if href and not href.startswith("http"):
                    _merge_unique(extends, [normalize_text(link.get_text())])

        match = re.search(r"\bextends\s+(.+?)(?:\s+implements\b|$)", strip_generics(type_signature))
        if match:
            _merge_unique(extends, [simple_type_name(name) for name in match.group(1).split(",")])

        return extends

    def extract_implements(self, class_description: Optional[Tag], type_signature: str) -> List[str]:
        """Known implementing classes from the notes, then the implements clause."""
        implements: List[str] = []

        for dd in self._notes_entries(class_description, IMPLEMENTING_CLASSES_LABEL, exact=False):
            _merge_unique(implements, [normalize_text(link.get_text()) for link in dd.select("code a")])

        match = re.search(r"\bimplements\s+(.+)$", strip_generics(type_signature))
        if match:
            _merge_unique(implements, [simple_type_name(name) for name in match.group(1).split(",")])

        return implements

    def extract_see_also(self, class_description: Optional[Tag]) -> List[str]:
        see_also: List[str] = []
        for dd in self._notes_entries(class_description, SEE_ALSO_LABEL):
            for link in dd.find_all("a"):
                text = normalize_text(link.get_text())
                if text:
                    see_also.append(text)
        return see_also

    # ------------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------------

    def _member_sections(self, soup: BeautifulSoup, container: str) -> List[tuple]:
        """(name, section) pairs of detail sections with a non-empty heading."""
        sections = []
        for section in soup.select(f".{container} .detail"):
            heading = section.find("h3")
            name = normalize_text(heading.get_text()) if heading else ""
            if name:
                sections.append((name, section))
        return sections

    def _member_description(self, section: Tag) -> str:
        block = section.select_one(".block")
        return html_to_markdown(block) if block else ""

    def extract_methods(self, soup: BeautifulSoup, class_name: str, package_name: str) -> List[MethodDoc]:
        methods: List[MethodDoc] = []

        for name, section in self._member_sections(soup, "method-details"):
            signature_element = section.select_one(".member-signature")
            signature = normalize_text(signature_element.get_text()) if signature_element else ""

            return_type_element = section.select_one(".member-signature .return-type")
            return_type = normalize_text(return_type_element.get_text()) if return_type_element else ""

            methods.append(MethodDoc(
                name=name,
                signature=signature,
                return_type=return_type or None,
                parameters=parse_parameters(signature, name),
                description=self._member_description(section),
                modifiers=extract_modifiers(signature),
                deprecated=section.select_one(".deprecation-block") is not None,
                class_name=class_name,
                package_name=package_name,
            ))

        return methods

    def extract_fields(self, soup: BeautifulSoup) -> List[FieldDoc]:
        fields: List[FieldDoc] = []

        for name, section in self._member_sections(soup, "field-details"):
            signature_element = section.select_one(".member-signature")
            signature = normalize_text(signature_element.get_text()) if signature_element else ""

            fields.append(FieldDoc(
                name=name,
                type=self._field_type(section, signature, name),
                description=self._member_description(section),
                modifiers=extract_modifiers(signature),
                deprecated=section.select_one(".deprecation-block") is not None,
            ))

        return fields

    def _field_type(self, section: Tag, signature: str, name: str) -> str:
        type_element = section.select_one(".member-signature .return-type")
        if type_element is not None:
            field_type = normalize_text(type_element.get_text())
            if field_type:
                return field_type

        match = re.search(rf"(?<![\w.]){re.escape(name)}\b", signature)
        prefix = signature[:match.start()] if match else ""
        tokens = [
            token for token in prefix.split()
            if token not in MODIFIER_KEYWORDS and not token.startswith("@")
            and token not in ("transient", "volatile")
        ]
        return " ".join(tokens) or DEFAULT_FIELD_TYPE


def extract_package_description(html: str) -> str:
    """Markdown of the first description block of a package-summary page."""
    soup = BeautifulSoup(html, HTML_PARSER)
    block = soup.select_one(".package-description .block")
    return html_to_markdown(block) if block else ""
