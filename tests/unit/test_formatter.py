from javadoc_mcp.formatters import format_class_markdown
from javadoc_mcp.parsers import ClassDocParser
from javadoc_mcp.schemas import ClassDocumentation, EntityKind, FieldDoc, MethodDoc


def test_format_parsed_class(widget_html: str) -> None:
    doc = ClassDocParser().parse("com.acme.ui.Widget", "com/acme/ui/Widget.html", widget_html)

    markdown = format_class_markdown(doc)

    assert markdown.startswith("# Widget\n\n**Package:** com.acme.ui\n**Type:** class\n")
    assert "**Extends:** Component" in markdown
    assert "**Implements:** Renderable, Serializable" in markdown
    assert "## Description\n\nA visual `Widget`" in markdown
    assert "### DEFAULT_WIDTH: int\nDefault width in pixels.\n*Modifiers:* public, static, final" in markdown
    assert "### public boolean render(Context context)\nRenders into a context.\n\n**Returns:** boolean" in markdown
    assert "## See Also\n\n- Panel\n- Renderable" in markdown
    assert "DEPRECATED" in markdown.split("## Methods", 1)[1]


def test_missing_return_type_renders_void() -> None:
    doc = ClassDocumentation(
        fully_qualified_name="com.x.Mode",
        simple_name="Mode",
        package="com.x",
        kind=EntityKind.ENUM,
        deprecated=True,
        methods=[MethodDoc(name="reset", signature="reset()", class_name="com.x.Mode", package_name="com.x")],
        html_path="com/x/Mode.html",
    )

    markdown = format_class_markdown(doc)

    assert "**Type:** enum" in markdown
    assert "**⚠️ DEPRECATED**" in markdown.split("## Methods", 1)[0]
    assert "### reset()\n**Returns:** void" in markdown
    assert "## Description" not in markdown
    assert "## Fields" not in markdown
    assert "## See Also" not in markdown


def test_deprecated_field_is_flagged() -> None:
    doc = ClassDocumentation(
        fully_qualified_name="com.x.Limits",
        simple_name="Limits",
        package="com.x",
        fields=[FieldDoc(name="MAX", type="int", deprecated=True)],
        html_path="com/x/Limits.html",
    )

    assert "### MAX: int\n**⚠️ DEPRECATED**" in format_class_markdown(doc)
