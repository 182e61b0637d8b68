"""
Pydantic schemas for the Javadoc index.

This module defines all data models shared by the inventory parser, the detail
extractor, the search engine and the MCP server.

Architecture:
- TypeSearchEntry / MemberSearchEntry / PackageSearchEntry: Raw Javadoc search-index records
- ParameterDoc, MethodDoc, FieldDoc: Members of a documented type
- ClassDocumentation: A documented class, interface, enum, exception or annotation
- PackageDocumentation: A package and its member types
- MethodSearchEntry: Flat method record used by method search
- IndexSnapshot: Serialized index consumed at startup
- ClassSearchResult / MethodSearchResult / PackageSearchResult: Query results
- SearchSettings: Tunable fuzzy-search knobs
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EntityKind(str, Enum):
    """Kind of a documented type."""
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    EXCEPTION = "exception"
    ANNOTATION = "annotation"


# ============================================================================
# RAW INVENTORY SCHEMAS
# ============================================================================

class TypeSearchEntry(BaseModel):
    """Entry of type-search-index.js."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    package: Optional[str] = Field(None, alias="p", description="Owning package; absent for the 'All Classes' marker")
    label: str = Field(alias="l", description="Simple type name")
    url: Optional[str] = Field(None, alias="u", description="Document locator, if provided")


class MemberSearchEntry(BaseModel):
    """Entry of member-search-index.js."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    package: str = Field(alias="p", description="Owning package")
    class_name: str = Field(alias="c", description="Owning simple class name")
    label: str = Field(alias="l", description="Field name or method label such as 'get(Path)'")
    url: Optional[str] = Field(None, alias="u", description="Percent-encoded signature anchor")


class PackageSearchEntry(BaseModel):
    """Entry of package-search-index.js."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    label: str = Field(alias="l", description="Package name or the 'All Packages' marker")
    url: Optional[str] = Field(None, alias="u", description="Document locator, if provided")


# ============================================================================
# DOCUMENTATION SCHEMAS
# ============================================================================

class ParameterDoc(BaseModel):
    """Method parameter parsed from a signature."""
    name: Optional[str] = Field(None, description="Parameter name, absent for type-only parts")
    type: str = Field(description="Parameter type as written in the signature")


class MethodDoc(BaseModel):
    """
    Method of a documented type.

    Created from the inventory with name and signature only; detail extraction
    fills in return type, parameters, description, modifiers and deprecation.
    """
    name: str = Field(description="Method name")
    signature: str = Field(description="Display signature")
    return_type: Optional[str] = Field(None, description="Return type; absent means void")
    parameters: List[ParameterDoc] = Field(default_factory=list, description="Ordered parameters")
    description: Optional[str] = Field(None, description="Markdown description")
    modifiers: List[str] = Field(default_factory=list, description="Modifier keywords")
    deprecated: bool = Field(False, description="Whether the method is deprecated")
    class_name: str = Field(description="Owning fully-qualified class name")
    package_name: str = Field(description="Owning package")


class FieldDoc(BaseModel):
    """Field or constant of a documented type."""
    name: str = Field(description="Field name")
    type: str = Field(description="Declared type")
    description: Optional[str] = Field(None, description="Markdown description")
    modifiers: List[str] = Field(default_factory=list, description="Modifier keywords")
    deprecated: bool = Field(False, description="Whether the field is deprecated")


class ClassDocumentation(BaseModel):
    """
    Documented class, interface, enum, exception or annotation.

    Inventory parsing creates a skeleton (no description, no fields); the detail
    extractor produces the fully populated record from the type's HTML page.
    """
    fully_qualified_name: str = Field(description="Package-qualified unique name")
    simple_name: str = Field(description="Unqualified name, not unique")
    package: str = Field(description="Owning package")
    kind: EntityKind = Field(EntityKind.CLASS, description="Kind of type")
    description: Optional[str] = Field(None, description="Markdown description")
    extends: List[str] = Field(default_factory=list, description="Superclass / superinterface names")
    implements: List[str] = Field(default_factory=list, description="Implemented interface names")
    methods: List[MethodDoc] = Field(default_factory=list, description="Methods, overloads included")
    fields: List[FieldDoc] = Field(default_factory=list, description="Fields and constants")
    deprecated: bool = Field(False, description="Whether the type is deprecated")
    see_also: List[str] = Field(default_factory=list, description="Related type names")
    html_path: str = Field(description="Locator of the detail document")

    class Config:
        json_schema_extra = {
            "example": {
                "fully_qualified_name": "com.onwbp.adaptation.Adaptation",
                "simple_name": "Adaptation",
                "package": "com.onwbp.adaptation",
                "kind": "interface",
                "description": "Provides access to a dataset or a record.",
                "extends": ["ReadContext"],
                "implements": [],
                "methods": [],
                "fields": [],
                "deprecated": False,
                "see_also": ["AdaptationHome"],
                "html_path": "com/onwbp/adaptation/Adaptation.html"
            }
        }


class PackageDocumentation(BaseModel):
    """Package and its member types."""
    name: str = Field(description="Package name")
    description: Optional[str] = Field(None, description="Markdown description")
    classes: List[str] = Field(default_factory=list, description="Member FQNs in inventory order")
    related_packages: List[str] = Field(default_factory=list, description="Related package names")


class MethodSearchEntry(BaseModel):
    """Flat method record; every overload is its own entry."""
    method: str = Field(description="Method name")
    signature: str = Field(description="Display signature")
    class_name: str = Field(description="Owning fully-qualified class name")
    package_name: str = Field(description="Owning package")
    return_type: Optional[str] = Field(None, description="Return type, when known")
    description: Optional[str] = Field(None, description="Markdown description, when known")


# ============================================================================
# SNAPSHOT SCHEMA
# ============================================================================

class IndexSnapshot(BaseModel):
    """
    Serialized index loaded at startup.

    `classes` holds every entity under its FQN and under its simple name.
    """
    version: Optional[str] = Field(None, description="Documented library version")
    classes: Dict[str, ClassDocumentation] = Field(default_factory=dict, description="FQN and alias keys")
    methods: Dict[str, List[MethodSearchEntry]] = Field(default_factory=dict, description="Method name -> entries")
    packages: Dict[str, PackageDocumentation] = Field(default_factory=dict, description="Package name -> package")
    categories_by_task: Dict[str, List[str]] = Field(default_factory=dict, description="Task label -> entity FQNs")


# ============================================================================
# SEARCH SCHEMAS
# ============================================================================

class SearchSettings(BaseModel):
    """Fuzzy-search knobs shared by the three collections."""
    threshold: float = Field(0.4, ge=0.0, le=1.0, description="Maximum field score counted as a match")
    min_match_char_length: int = Field(2, ge=1, description="Queries shorter than this match nothing")
    distance: int = Field(100, ge=1, description="Characters over which a match location costs a full point")
    class_weights: Dict[str, float] = Field(
        default_factory=lambda: {"simple_name": 2.0, "fully_qualified_name": 1.5, "package": 0.5, "description": 0.8},
        description="Class search key weights",
    )
    method_weights: Dict[str, float] = Field(
        default_factory=lambda: {"method": 2.0, "class_name": 1.0, "signature": 0.5},
        description="Method search key weights",
    )
    package_weights: Dict[str, float] = Field(
        default_factory=lambda: {"name": 2.0, "description": 1.0},
        description="Package search key weights",
    )
    over_fetch_factor: int = Field(3, ge=1, description="Candidates fetched per requested result before filtering")
    description_preview_length: int = Field(200, ge=0, description="Description characters kept in results")
    preview_size: int = Field(5, ge=0, description="Key methods / key classes kept in results")


class ClassSearchResult(BaseModel):
    """Class search hit."""
    name: str
    fully_qualified_name: str
    kind: EntityKind
    package: str
    description: Optional[str] = None
    key_methods: List[str] = Field(default_factory=list)
    relevance_score: float = Field(ge=0.0, le=1.0)


class MethodSearchResult(BaseModel):
    """Method search hit."""
    method: str
    signature: str
    class_name: str
    package_name: str
    return_type: Optional[str] = None
    description: Optional[str] = None
    relevance_score: float = Field(ge=0.0, le=1.0)


class PackageSearchResult(BaseModel):
    """Package search or task-discovery hit."""
    name: str
    description: Optional[str] = None
    key_classes: List[str] = Field(default_factory=list)
    relevance_score: float = Field(ge=0.0, le=1.0)


class IndexStats(BaseModel):
    """Counts reported by the search engine."""
    entity_count: int = Field(description="Entities, aliases excluded")
    entity_count_with_aliases: int = Field(description="Class map size, simple-name aliases included")
    method_name_count: int = Field(description="Distinct method names")
    method_count: int = Field(description="Method entries, overloads included")
    package_count: int = Field(description="Packages")
    category_count: int = Field(description="Task categories")
