import json
from pathlib import Path
from typing import Callable, Dict, List

import pytest

from javadoc_mcp.indexer import IndexBuilder

INDEX_HTML = """<!DOCTYPE HTML>
<html lang="en">
<head><title>Overview (Acme Toolkit Version 2.1.0 API)</title></head>
<body class="index-redirect-page"><main role="main">Acme Toolkit</main></body>
</html>
"""

WIDGET_HTML = """<!DOCTYPE HTML>
<html lang="en">
<head><title>Widget (Acme Toolkit Version 2.1.0 API)</title></head>
<body class="class-declaration-page">
<main role="main">
<div class="header"><h1 title="Class Widget" class="title">Class Widget</h1></div>
<section class="class-description" id="class-description">
<hr>
<div class="type-signature"><span class="modifiers">public class </span><span class="element-name type-name-label">Widget</span>
<span class="extends-implements">extends <a href="Component.html">Component</a>
implements <a href="Renderable.html">Renderable</a>, java.io.Serializable</span></div>
<div class="block">A visual <code>Widget</code> that can be <em>rendered</em>.
<p>Widgets are not thread-safe.</p></div>
<dl class="notes">
<dt>See Also:</dt>
<dd><ul class="see-list"><li><a href="Panel.html"><code>Panel</code></a></li><li><a href="Renderable.html"><code>Renderable</code></a></li></ul></dd>
</dl>
</section>
<section class="details">
<section class="field-details" id="field-detail">
<h2>Field Details</h2>
<ul class="member-list">
<li><section class="detail" id="DEFAULT_WIDTH">
<h3>DEFAULT_WIDTH</h3>
<div class="member-signature"><span class="modifiers">public static final</span>&nbsp;<span class="return-type">int</span>&nbsp;<span class="element-name">DEFAULT_WIDTH</span></div>
<div class="block">Default width in pixels.</div>
</section></li>
</ul>
</section>
<section class="method-details" id="method-detail">
<h2>Method Details</h2>
<ul class="member-list">
<li><section class="detail" id="render()">
<h3>render</h3>
<div class="member-signature"><span class="modifiers">public</span>&nbsp;<span class="return-type">void</span>&nbsp;<span class="element-name">render</span>()</div>
<div class="block">Renders with the default context.</div>
</section></li>
<li><section class="detail" id="render(com.acme.ui.Context)">
<h3>render</h3>
<div class="member-signature"><span class="modifiers">public</span>&nbsp;<span class="return-type">boolean</span>&nbsp;<span class="element-name">render</span><wbr><span class="parameters">(<a href="Context.html">Context</a>&nbsp;context)</span></div>
<div class="block">Renders into a context.</div>
</section></li>
<li><section class="detail" id="resize(int,int)">
<h3>resize</h3>
<div class="member-signature"><span class="modifiers">public</span>&nbsp;<span class="return-type">void</span>&nbsp;<span class="element-name">resize</span><wbr><span class="parameters">(int&nbsp;width, int&nbsp;height)</span></div>
<div class="deprecation-block"><span class="deprecated-label">Deprecated.</span></div>
<div class="block">Resizes the widget.</div>
</section></li>
<li><section class="detail">
<h3></h3>
<div class="member-signature">broken()</div>
</section></li>
</ul>
</section>
</section>
</main>
</body>
</html>
"""

CHECKER_HTML = """<!DOCTYPE HTML>
<html lang="en">
<head><title>Checker (Acme Toolkit Version 2.1.0 API)</title></head>
<body class="class-declaration-page">
<main role="main">
<section class="class-description" id="class-description">
<dl class="notes">
<dt>All Superinterfaces:</dt>
<dd><code><a href="Rule.html">Rule</a></code>, <code><a href="https://docs.oracle.com/javase/8/docs/api/java/lang/AutoCloseable.html" class="external-link">AutoCloseable</a></code></dd>
<dt>All Known Implementing Classes:</dt>
<dd><code><a href="DefaultChecker.html">DefaultChecker</a></code></dd>
</dl>
<hr>
<div class="type-signature"><span class="modifiers">public interface </span><span class="element-name type-name-label">Checker</span>
<span class="extends-implements">extends <a href="Rule.html">Rule</a>, java.lang.AutoCloseable</span></div>
<div class="deprecation-block"><span class="deprecated-label">Deprecated.</span>
<div class="deprecation-comment">Use Rule directly.</div></div>
<div class="block">Checks values against rules.</div>
</section>
<section class="details">
<section class="method-details" id="method-detail">
<ul class="member-list">
<li><section class="detail" id="check(java.lang.Object)">
<h3>check</h3>
<div class="member-signature"><span class="return-type">boolean</span>&nbsp;<span class="element-name">check</span><wbr><span class="parameters">(<a href="https://docs.oracle.com/javase/8/docs/api/java/lang/Object.html" class="external-link">Object</a>&nbsp;value)</span></div>
<div class="block">Returns <code>true</code> when the value passes.</div>
</section></li>
</ul>
</section>
</section>
</main>
</body>
</html>
"""

VALIDATION_PACKAGE_HTML = """<!DOCTYPE HTML>
<html lang="en">
<head><title>com.acme.validation (Acme Toolkit Version 2.1.0 API)</title></head>
<body class="package-declaration-page">
<section class="package-description" id="package-description">
<div class="block">Validation <b>rules</b> and checkers.</div>
</section>
</body>
</html>
"""

TYPES = [
    {"l": "All Classes and Interfaces", "u": "allclasses-index.html"},
    {"p": "com.acme.ui", "l": "Widget"},
    {"p": "com.acme.ui", "l": "Panel"},
    {"p": "com.acme.validation", "l": "Checker"},
    {"p": "com.acme.validation", "l": "ValidationException"},
]

MEMBERS = [
    {"p": "com.acme.ui", "c": "Widget", "l": "render()", "u": "render()"},
    {"p": "com.acme.ui", "c": "Widget", "l": "render(Context)", "u": "render(com.acme.ui.Context)"},
    {"p": "com.acme.ui", "c": "Widget", "l": "resize(int, int)", "u": "resize(int,int)"},
    {"p": "com.acme.ui", "c": "Widget", "l": "DEFAULT_WIDTH"},
    {"p": "com.acme.ui", "c": "Panel", "l": "add(Widget)", "u": "add(com.acme.ui.Widget)"},
    {"p": "com.acme.ui", "c": "Panel", "l": "setItems(List<Widget>)", "u": "setItems(java.util.List%3Ccom.acme.ui.Widget%3E)"},
    {"p": "com.acme.validation", "c": "Checker", "l": "check(Object)", "u": "check(java.lang.Object)"},
    {"p": "com.acme.validation", "c": "ValidationException", "l": "getRule()", "u": "getRule()"},
]

PACKAGES = [
    {"l": "All Packages", "u": "allpackages-index.html"},
    {"l": "com.acme.ui"},
    {"l": "com.acme.validation"},
]

CATEGORIES = {
    "validation": ["com.acme.validation.Checker", "com.acme.validation.ValidationException"],
    "user interface": ["com.acme.ui.Widget"],
    "rendering": ["com.acme.ui.Widget", "com.acme.ui.Panel"],
}


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def write_inventory(
    root: Path,
    types: List[Dict],
    members: List[Dict],
    packages: List[Dict],
) -> Path:
    """Write the three search-index files the way javadoc emits them."""
    _write_file(root / "type-search-index.js", f"typeSearchIndex = {json.dumps(types)};updateSearchResults();")
    _write_file(root / "member-search-index.js", f"memberSearchIndex = {json.dumps(members)};updateSearchResults();")
    _write_file(root / "package-search-index.js", f"packageSearchIndex = {json.dumps(packages)};updateSearchResults();")
    return root


@pytest.fixture
def inventory_writer() -> Callable[..., Path]:
    return write_inventory


@pytest.fixture
def widget_html() -> str:
    return WIDGET_HTML


@pytest.fixture
def checker_html() -> str:
    return CHECKER_HTML


@pytest.fixture
def javadoc_dir(tmp_path: Path) -> Path:
    """Javadoc tree with pages for Widget and Checker; Panel and ValidationException have none."""
    root = tmp_path / "javadoc"
    write_inventory(root, TYPES, MEMBERS, PACKAGES)
    _write_file(root / "index.html", INDEX_HTML)
    _write_file(root / "com" / "acme" / "ui" / "Widget.html", WIDGET_HTML)
    _write_file(root / "com" / "acme" / "validation" / "Checker.html", CHECKER_HTML)
    _write_file(root / "com" / "acme" / "validation" / "package-summary.html", VALIDATION_PACKAGE_HTML)
    return root


@pytest.fixture
def categories_file(tmp_path: Path) -> Path:
    path = tmp_path / "categories.json"
    _write_file(path, json.dumps(CATEGORIES))
    return path


@pytest.fixture
def snapshot(javadoc_dir: Path):
    return IndexBuilder(javadoc_dir).build(categories=CATEGORIES)


@pytest.fixture
def index_path(tmp_path: Path, javadoc_dir: Path, snapshot) -> Path:
    return IndexBuilder(javadoc_dir).save(snapshot, tmp_path / "data" / "index.json")

